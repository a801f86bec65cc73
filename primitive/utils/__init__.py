from typing import AnyStr


def ensure_bytes(value: AnyStr) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf8")
    raise ValueError("Expected bytes or str")


def ensure_str(value: AnyStr) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode()
    raise ValueError("Expected bytes or str")


def starts_with(value: str, needle: str) -> bool:
    if not value and not needle:
        return True
    return value.startswith(needle)


def starts_with_one_of(value: str, *needles: str) -> bool:
    if not value and not needles:
        return True
    return any(starts_with(value, needle) for needle in needles)


def ends_with(value: str, needle: str) -> bool:
    if not value and not needle:
        return True
    return value.endswith(needle)


def ends_with_one_of(value: str, *needles: str) -> bool:
    if not value and not needles:
        return True
    return any(ends_with(value, needle) for needle in needles)


def contains(value: str, needle: str) -> bool:
    if not value and not needle:
        return True
    return needle in value


def contains_one_of(value: str, *needles: str) -> bool:
    """
    Returns a value indicating whether the given string contains at least one of
    the given needles. An empty string with no needles is considered a match.
    """
    if not value and not needles:
        return True
    return any(contains(value, needle) for needle in needles)
