import dataclasses
from collections.abc import Mapping, MutableMapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Hashable, Iterator, Optional
from uuid import UUID

from primitive.exceptions import StashError
from primitive.settings.json import json_settings

_JSON_FRIENDLY_TYPES = (
    str,
    int,
    float,
    bool,
    bytes,
    date,
    datetime,
    time,
    UUID,
    Decimal,
    Enum,
)


def _is_json_friendly(value: Any) -> bool:
    if value is None or isinstance(value, _JSON_FRIENDLY_TYPES):
        return True
    if isinstance(value, AbstractStash):
        return True
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return True
    return callable(getattr(value, "json_serialize", None))


def _to_plain_data(value: Any) -> Any:
    if isinstance(value, AbstractStash):
        return value.json_serialize()
    if isinstance(value, dict):
        return {key: _to_plain_data(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain_data(item) for item in value]
    if value is not None and callable(getattr(value, "json_serialize", None)):
        return value.json_serialize()
    return value


class AbstractStash:
    """
    Base class for key/value containers whose values can always be serialized
    to JSON. Values are validated when they are stored: nested dictionaries,
    lists and tuples are validated recursively.
    """

    def __init__(self, items: Optional[Mapping] = None):
        object.__setattr__(self, "_items", {})
        if items:
            self._store_items(items)

    @classmethod
    def from_items(cls, items: Mapping):
        return cls(items)

    @classmethod
    def from_json(cls, text: str):
        data = json_settings.loads(text)
        if not isinstance(data, dict):
            raise StashError(
                f"Expected a JSON object; got instead {type(data).__name__}"
            )
        return cls(data)

    def _store_items(self, items: Mapping) -> None:
        sanitized = {key: self._map_item(value, key) for key, value in items.items()}
        self._items.update(sanitized)

    def _store(self, key: Hashable, value: Any) -> None:
        self._items[key] = self._map_item(value, key)

    def _map_item(self, item: Any, key: Hashable) -> Any:
        if isinstance(item, dict):
            return {
                current_key: self._map_item(current_value, current_key)
                for current_key, current_value in item.items()
            }
        if isinstance(item, (list, tuple)):
            mapped = [
                self._map_item(current_value, index)
                for index, current_value in enumerate(item)
            ]
            return tuple(mapped) if isinstance(item, tuple) else mapped
        return self._sanitize_item(item, key)

    def _sanitize_item(self, item: Any, key: Hashable) -> Any:
        if not _is_json_friendly(item):
            raise StashError(
                f"Cannot stash value of key `{key}`, "
                f"{type(item).__name__} values cannot be serialized to JSON",
                key,
            )
        return item

    def _fetch(self, key: Hashable) -> Any:
        return self._items[key]

    def _has(self, key: Hashable) -> bool:
        return key in self._items

    def _remove(self, key: Hashable) -> None:
        del self._items[key]

    def json_serialize(self) -> Dict[Any, Any]:
        return _to_plain_data(self._items)

    def to_json(self, pretty: bool = False) -> str:
        return json_settings.dumps(self.json_serialize(), pretty=pretty)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other):
        if isinstance(other, AbstractStash):
            return type(self) is type(other) and self._items == other._items
        return NotImplemented

    def __repr__(self):
        return f"<{type(self).__name__} {self._items!r}>"


class ArrayStash(AbstractStash, MutableMapping):
    """Stash supporting mapping access: `stash["key"]`."""

    def __getitem__(self, key: Hashable) -> Any:
        return self._fetch(key)

    def __setitem__(self, key: Hashable, value: Any) -> None:
        self._store(key, value)

    def __delitem__(self, key: Hashable) -> None:
        self._remove(key)

    def __contains__(self, key: object) -> bool:
        return self._has(key)  # type: ignore

    def __iter__(self) -> Iterator:
        return iter(self._items)


class Stash(AbstractStash):
    """Stash supporting attribute access: `stash.key`."""

    def __getattr__(self, name: str) -> Any:
        # called only when regular attribute lookup fails
        if name.startswith("__") or name == "_items":
            raise AttributeError(name)
        try:
            return self._fetch(name)
        except KeyError:
            raise AttributeError(
                f"'{type(self).__name__}' object has no item '{name}'"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        self._store(name, value)

    def __delattr__(self, name: str) -> None:
        try:
            self._remove(name)
        except KeyError:
            raise AttributeError(
                f"'{type(self).__name__}' object has no item '{name}'"
            ) from None

    def __contains__(self, name: object) -> bool:
        return self._has(name)  # type: ignore
