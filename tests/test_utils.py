import pytest

from primitive.utils import (
    contains,
    contains_one_of,
    ends_with,
    ends_with_one_of,
    ensure_bytes,
    ensure_str,
    starts_with,
    starts_with_one_of,
)


@pytest.mark.parametrize(
    "value,expected_result", [("hello", b"hello"), (b"hello", b"hello")]
)
def test_ensure_bytes(value, expected_result):
    assert ensure_bytes(value) == expected_result


@pytest.mark.parametrize(
    "value,expected_result", [("hello", "hello"), (b"hello", "hello")]
)
def test_ensure_str(value, expected_result):
    assert ensure_str(value) == expected_result


def test_ensure_bytes_throws_for_invalid_value():
    with pytest.raises(ValueError):
        ensure_bytes(True)  # type: ignore


def test_ensure_str_throws_for_invalid_value():
    with pytest.raises(ValueError):
        ensure_str(True)  # type: ignore


@pytest.mark.parametrize(
    "value,needle,expected_result",
    [
        ("", "", True),
        ("hello", "", True),
        ("hello", "he", True),
        ("hello", "lo", False),
        ("", "he", False),
    ],
)
def test_starts_with(value, needle, expected_result):
    assert starts_with(value, needle) is expected_result


@pytest.mark.parametrize(
    "value,needle,expected_result",
    [
        ("", "", True),
        ("hello", "lo", True),
        ("hello", "he", False),
        ("", "lo", False),
    ],
)
def test_ends_with(value, needle, expected_result):
    assert ends_with(value, needle) is expected_result


@pytest.mark.parametrize(
    "value,needle,expected_result",
    [
        ("", "", True),
        ("hello world", "o w", True),
        ("hello world", "cats", False),
    ],
)
def test_contains(value, needle, expected_result):
    assert contains(value, needle) is expected_result


def test_one_of_helpers():
    assert starts_with_one_of("https://example.com", "http://", "https://") is True
    assert starts_with_one_of("ftp://example.com", "http://", "https://") is False
    assert ends_with_one_of("cat.png", ".jpg", ".png") is True
    assert ends_with_one_of("cat.gif", ".jpg", ".png") is False
    assert contains_one_of("hello world", "cats", "world") is True
    assert contains_one_of("hello world", "cats", "dogs") is False


def test_one_of_helpers_without_needles():
    assert starts_with_one_of("") is True
    assert ends_with_one_of("") is True
    assert contains_one_of("") is True
    assert starts_with_one_of("hello") is False
    assert contains_one_of("hello") is False
