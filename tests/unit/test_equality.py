"""Tests for deep equality."""

import datetime
import re
from collections import OrderedDict, namedtuple
from dataclasses import dataclass
from typing import Any

import pytest

from atest_engine.equality import equal


@dataclass
class Point:
    x: int
    y: int


class Record:
    def __init__(self, **attributes: Any) -> None:
        self.__dict__.update(attributes)


class Slotted:
    __slots__ = ("a", "b")

    def __init__(self, a: Any, b: Any) -> None:
        self.a = a
        self.b = b


Pair = namedtuple("Pair", "left right")


@pytest.mark.parametrize(
    ("a", "b", "expected"),
    [
        (1, 1, True),
        ("a", "a", True),
        (None, None, True),
        (1, "1", False),
        (1, 1.0, False),
        (True, 1, False),
        (0, None, False),
        (2.5, 2.5, True),
        (float("nan"), float("nan"), False),
    ],
)
def test_primitives_compare_strictly(a: Any, b: Any, expected: bool) -> None:
    """Scalars are equal only with the same type and value."""
    assert equal(a, b) is expected


def test_same_reference_is_equal() -> None:
    """An object is always equal to itself."""
    value = [1, {"a": 2}]

    assert equal(value, value)


def test_compares_nested_dicts_and_lists() -> None:
    """Compares nested containers recursively."""
    assert equal({"a": 1, "b": [2]}, {"a": 1, "b": [2]})
    assert not equal({"a": 1, "b": [2]}, {"a": 1, "b": [3]})


def test_lists_are_order_sensitive() -> None:
    """Sequences compare pairwise by index."""
    assert equal(["a", "b"], ["a", "b"])
    assert not equal(["a", "b"], ["b", "a"])
    assert not equal(["a"], ["a", "b"])


def test_differing_container_types_are_not_equal() -> None:
    """Concrete types must match."""
    assert not equal([1, 2], (1, 2))
    assert not equal({"a": 1}, OrderedDict(a=1))
    assert not equal({1}, frozenset({1}))
    assert not equal(Pair(1, 2), (1, 2))


def test_named_tuples_compare_by_field() -> None:
    """Named tuples compare like tuples of the same type."""
    assert equal(Pair(1, [2]), Pair(1, [2]))
    assert not equal(Pair(1, [2]), Pair(1, [3]))


def test_mapping_key_order_does_not_matter() -> None:
    """Mappings compare by key regardless of insertion order."""
    assert equal({"a": 1, "b": 2}, {"b": 2, "a": 1})


def test_none_value_differs_from_missing_key() -> None:
    """A key set to None is not the same as an absent key."""
    assert not equal({"a": None}, {})
    assert not equal({"a": None}, {"b": None})


def test_mapping_keys_compare_strictly() -> None:
    """Keys that hash alike but differ in type do not match."""
    assert not equal({1: "x"}, {True: "x"})
    assert not equal({1.0: "x"}, {1: "x"})
    assert equal({1: "x"}, {1: "x"})


def test_sets_are_order_independent() -> None:
    """Sets compare by membership."""
    assert equal({1, 2}, {2, 1})
    assert not equal({1, 2}, {1, 3})


def test_sets_match_composite_elements_structurally() -> None:
    """Set elements are matched with deep equality, one to one."""
    assert equal(frozenset({(1, (2,)), (3, (4,))}), frozenset({(3, (4,)), (1, (2,))}))
    assert not equal(frozenset({(1,), (2,)}), frozenset({(1,), (3,)}))


def test_dates_compare_by_instant() -> None:
    """Aware datetimes in different zones are equal for the same instant."""
    utc = datetime.datetime(2024, 1, 1, 12, tzinfo=datetime.UTC)
    plus_two = datetime.datetime(
        2024, 1, 1, 14, tzinfo=datetime.timezone(datetime.timedelta(hours=2))
    )

    assert equal(utc, plus_two)
    assert not equal(utc, utc + datetime.timedelta(seconds=1))


def test_patterns_compare_by_source_and_flags() -> None:
    """Compiled patterns compare by pattern text and flags."""
    assert equal(re.compile("a+"), re.compile("a+"))
    assert not equal(re.compile("a+"), re.compile("a+", re.IGNORECASE))
    assert not equal(re.compile("a+"), re.compile("b+"))


def test_byte_buffers_compare_byte_by_byte() -> None:
    """Byte buffers compare by length, then content."""
    assert equal(bytearray(b"abc"), bytearray(b"abc"))
    assert not equal(bytearray(b"abc"), bytearray(b"abd"))
    assert not equal(b"ab", b"abc")
    assert equal(memoryview(b"xy"), memoryview(b"xy"))


def test_dataclasses_compare_by_fields() -> None:
    """Dataclass instances compare field by field."""
    assert equal(Point(1, 2), Point(1, 2))
    assert not equal(Point(1, 2), Point(1, 3))


def test_plain_objects_compare_by_attributes() -> None:
    """Objects compare by their own attributes."""
    assert equal(Record(a=1, b=[1]), Record(a=1, b=[1]))
    assert not equal(Record(a=1), Record(a=1, b=2))
    assert not equal(Record(a=1), Record(b=1))


def test_slotted_objects_compare_by_slots() -> None:
    """Objects with __slots__ compare by their slot values."""
    assert equal(Slotted(1, [2]), Slotted(1, [2]))
    assert not equal(Slotted(1, [2]), Slotted(1, [3]))


def test_exceptions_compare_by_type_and_arguments() -> None:
    """Exceptions compare by type and args."""
    assert equal(ValueError("x"), ValueError("x"))
    assert not equal(ValueError("x"), ValueError("y"))
    assert not equal(ValueError("x"), TypeError("x"))


def test_functions_compare_by_identity() -> None:
    """Distinct callables are never equal."""

    def first() -> None:
        pass

    def second() -> None:
        pass

    assert equal(first, first)
    assert not equal(first, second)


class TestCircularReferences:
    """Tests for self-referencing structures."""

    def test_self_referencing_dicts_are_equal(self) -> None:
        """Two dicts pointing at themselves compare equal."""
        a: dict[str, Any] = {}
        a["self"] = a
        b: dict[str, Any] = {}
        b["self"] = b

        assert equal(a, b)
        assert equal(b, a)

    def test_identically_shaped_cycles_are_equal(self) -> None:
        """Parent/child cycles of the same shape compare equal."""
        a1: dict[str, Any] = {}
        a1["child"] = {"parent": a1}
        a2: dict[str, Any] = {}
        a2["child"] = {"parent": a2}

        assert equal(a1, a2)

    def test_cycles_with_differing_leaf_are_not_equal(self) -> None:
        """A differing scalar inside a cycle makes the graphs unequal."""
        a3: dict[str, Any] = {}
        a3["child"] = {"parent": a3, "value": 1}
        a4: dict[str, Any] = {}
        a4["child"] = {"parent": a4, "value": 99}

        assert not equal(a3, a4)
        assert not equal(a4, a3)

    def test_mutually_referencing_objects(self) -> None:
        """Cycles through plain objects terminate."""
        c = Record()
        d = Record(a=c)
        c.a = d

        assert equal(Record(a=c), Record(a=d))

    def test_self_referencing_lists(self) -> None:
        """Lists containing themselves compare equal when shaped alike."""
        a: list[Any] = [1]
        a.append(a)
        b: list[Any] = [1]
        b.append(b)
        c: list[Any] = [2]
        c.append(c)

        assert equal(a, b)
        assert not equal(a, c)

    def test_cross_linked_cycles_with_differing_values(self) -> None:
        """Two-node cycles holding different values are not equal."""
        x = Record()
        y = Record(a=1, x=x)
        x.y = y
        z = Record()
        w = Record(a=2, x=z)
        z.y = w

        assert not equal(x, z)
