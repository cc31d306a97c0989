"""Deep structural equality used to derive test verdicts."""

import dataclasses
import datetime
import re
from collections.abc import Mapping
from typing import Any

_TEMPORAL_TYPES = (datetime.date, datetime.time, datetime.timedelta)
_BUFFER_TYPES = (bytes, bytearray, memoryview)

_Visiting = set[tuple[int, int]]


def equal(a: Any, b: Any) -> bool:
    """Compare two values for deep structural equality.

    Composite values (mappings, sets, sequences, byte buffers, dates,
    patterns, dataclasses and plain objects) are compared recursively.
    Anything else compares strictly: same concrete type and ``==``.
    Self-referencing structures are supported; a pair of objects already
    being compared higher up the recursion is assumed equal, so two
    identically shaped cyclic graphs compare equal and a differing leaf
    anywhere still makes them unequal.

    Keys and attributes set to ``None`` are real values: ``{"a": None}`` is
    not equal to ``{}``.
    """
    return _equal(a, b, set())


def _equal(a: Any, b: Any, visiting: _Visiting) -> bool:
    if a is b:
        return True

    if not _is_composite(a) or not _is_composite(b):
        return _scalar_equal(a, b)

    pair = (id(a), id(b))
    if pair in visiting:
        return True

    if type(a) is not type(b):
        return False

    visiting.add(pair)
    try:
        return _composite_equal(a, b, visiting)
    finally:
        visiting.discard(pair)


def _scalar_equal(a: Any, b: Any) -> bool:
    if type(a) is not type(b) or callable(a):
        return False
    return bool(a == b)


def _composite_equal(a: Any, b: Any, visiting: _Visiting) -> bool:
    match a:
        case datetime.date() | datetime.time() | datetime.timedelta():
            return bool(a == b)
        case re.Pattern():
            return (a.pattern, a.flags) == (b.pattern, b.flags)
        case BaseException():
            return _equal(a.args, b.args, visiting) and _mappings_equal(
                _own_attributes(a), _own_attributes(b), visiting
            )
        case bytes() | bytearray() | memoryview():
            return _buffers_equal(a, b)
        case Mapping():
            return _mappings_equal(a, b, visiting)
        case set() | frozenset():
            return _sets_equal(a, b, visiting)
        case list() | tuple():
            return len(a) == len(b) and all(
                _equal(x, y, visiting) for x, y in zip(a, b, strict=True)
            )
        case _:
            return _mappings_equal(_own_attributes(a), _own_attributes(b), visiting)


def _buffers_equal(a: bytes | bytearray | memoryview, b: Any) -> bool:
    left, right = bytes(a), bytes(b)
    if len(left) != len(right):
        return False
    return all(x == y for x, y in zip(left, right, strict=True))


def _mappings_equal(
    a: Mapping[Any, Any], b: Mapping[Any, Any], visiting: _Visiting
) -> bool:
    if len(a) != len(b):
        return False
    # Keys that hash alike (1, 1.0, True) still have to be the same type.
    stored_keys = {key: key for key in b}
    for key, value in a.items():
        if key not in stored_keys:
            return False
        stored = stored_keys[key]
        if type(stored) is not type(key):
            return False
        if not _equal(value, b[stored], visiting):
            return False
    return True


def _sets_equal(a: Any, b: Any, visiting: _Visiting) -> bool:
    if len(a) != len(b):
        return False
    unmatched = list(b)
    for element in a:
        for index, candidate in enumerate(unmatched):
            if _equal(element, candidate, visiting):
                del unmatched[index]
                break
        else:
            return False
    return True


def _own_attributes(obj: Any) -> dict[str, Any]:
    """Collect the attributes an object holds itself, like a plain record."""
    if dataclasses.is_dataclass(obj):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}

    attributes = dict(vars(obj)) if hasattr(obj, "__dict__") else {}
    for cls in type(obj).__mro__:
        slots = cls.__dict__.get("__slots__", ())
        for name in (slots,) if isinstance(slots, str) else slots:
            if name in {"__dict__", "__weakref__"} or name in attributes:
                continue
            if hasattr(obj, name):
                attributes[name] = getattr(obj, name)
    return attributes


def _is_composite(value: Any) -> bool:
    if isinstance(value, (*_TEMPORAL_TYPES, *_BUFFER_TYPES, re.Pattern, BaseException)):
        return True
    if isinstance(value, Mapping | set | frozenset | list | tuple):
        return True
    if isinstance(value, type) or callable(value):
        return False
    if dataclasses.is_dataclass(value):
        return True
    if type(value).__eq__ is not object.__eq__:
        return False
    return hasattr(value, "__dict__") or hasattr(type(value), "__slots__")
