import json
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

import pytest

from primitive.exceptions import StashError
from primitive.stash import ArrayStash, Stash


@dataclass
class Cat:
    name: str
    age: int


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y

    def json_serialize(self):
        return {"x": self.x, "y": self.y}


class Opaque:
    pass


def test_array_stash_mapping_access():
    stash = ArrayStash({"a": 1, "b": "two"})

    assert stash["a"] == 1
    assert stash["b"] == "two"
    assert "a" in stash
    assert "c" not in stash
    assert len(stash) == 2

    stash["c"] = [1, 2, 3]
    assert stash["c"] == [1, 2, 3]

    del stash["a"]
    assert "a" not in stash
    assert len(stash) == 2


def test_array_stash_missing_key():
    stash = ArrayStash()

    with pytest.raises(KeyError):
        stash["missing"]

    assert stash.get("missing") is None
    assert stash.get("missing", 1) == 1


def test_array_stash_iteration():
    stash = ArrayStash({"a": 1, "b": 2})

    assert list(stash) == ["a", "b"]
    assert dict(stash.items()) == {"a": 1, "b": 2}


def test_array_stash_update_sanitizes_values():
    stash = ArrayStash()

    with pytest.raises(StashError):
        stash.update({"a": Opaque()})


def test_stash_attribute_access():
    stash = Stash({"name": "Celine", "age": 3})

    assert stash.name == "Celine"
    assert stash.age == 3
    assert hasattr(stash, "name")
    assert not hasattr(stash, "color")
    assert "name" in stash
    assert len(stash) == 2

    stash.color = "black"
    assert stash.color == "black"

    del stash.name
    assert not hasattr(stash, "name")


def test_stash_missing_attribute():
    stash = Stash()

    with pytest.raises(AttributeError):
        stash.missing

    with pytest.raises(AttributeError):
        del stash.missing


def test_from_items():
    assert ArrayStash.from_items({"a": 1}) == ArrayStash({"a": 1})
    assert isinstance(Stash.from_items({"a": 1}), Stash)


def test_stashes_of_different_types_are_not_equal():
    assert ArrayStash({"a": 1}) != Stash({"a": 1})


@pytest.mark.parametrize(
    "value",
    [
        None,
        True,
        1,
        1.5,
        "text",
        [1, "a", None],
        (1, 2),
        {"nested": {"deep": [1, 2]}},
        datetime(2020, 1, 1),
        UUID("6b3a7d43-0c5f-4f7e-9d7a-6f9b9a8e8a01"),
        Cat("Celine", 3),
        Point(1, 2),
        ArrayStash({"a": 1}),
    ],
)
def test_accepted_values(value):
    stash = ArrayStash({"value": value})

    assert stash["value"] == value


@pytest.mark.parametrize(
    "items,key",
    [
        ({"a": Opaque()}, "a"),
        ({"a": {"b": Opaque()}}, "b"),
        ({"a": [1, Opaque()]}, 1),
        ({"a": Cat}, "a"),
    ],
)
def test_rejected_values(items, key):
    with pytest.raises(StashError) as error:
        ArrayStash(items)

    assert error.value.key == key


def test_rejected_assignment():
    stash = Stash()

    with pytest.raises(StashError):
        stash.value = Opaque()

    assert "value" not in stash


def test_json_serialize_expands_nested_stashes():
    stash = ArrayStash(
        {
            "inner": Stash({"a": 1}),
            "list": [ArrayStash({"b": 2}), Point(1, 2)],
        }
    )

    assert stash.json_serialize() == {
        "inner": {"a": 1},
        "list": [{"b": 2}, {"x": 1, "y": 2}],
    }


def test_to_json():
    stash = Stash({"name": "Celine", "cat": Cat("Celine", 3), "tags": ("a", "b")})

    assert stash.to_json() == (
        '{"name":"Celine","cat":{"name":"Celine","age":3},"tags":["a","b"]}'
    )


def test_to_json_pretty():
    stash = ArrayStash({"a": 1})

    assert stash.to_json(pretty=True) == '{\n    "a": 1\n}'


def test_to_json_datetime():
    stash = ArrayStash({"created": datetime(2020, 1, 1, 10, 30)})

    assert json.loads(stash.to_json()) == {"created": "2020-01-01T10:30:00"}


def test_repr():
    assert repr(ArrayStash({"a": 1})) == "<ArrayStash {'a': 1}>"


def test_from_json():
    stash = ArrayStash.from_json('{"name": "Celine", "tags": ["a", "b"]}')

    assert stash == ArrayStash({"name": "Celine", "tags": ["a", "b"]})


def test_from_json_round_trip():
    stash = Stash({"name": "Céline", "nested": {"a": [1, 2]}})

    assert Stash.from_json(stash.to_json()) == stash


def test_from_json_requires_object():
    with pytest.raises(StashError):
        ArrayStash.from_json("[1, 2]")
