"""Classification and comparison helpers for decoded JSON values."""

from __future__ import annotations

import json
import math
from enum import Enum, auto

from jsonmapper.errors import DecodeError, InvalidNumericTypeError, TypeMismatchError


class ValueKind(Enum):
    NULL = auto()
    BOOL = auto()
    NUMBER = auto()
    STRING = auto()
    SEQUENCE = auto()
    MAPPING = auto()


def kind_of(value: object) -> ValueKind:
    """Return the JSON kind of *value*.

    ``bool`` is checked before ``int`` so that ``True`` never counts as a
    number.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, dict):
        return ValueKind.MAPPING
    raise TypeMismatchError(f"not a JSON value: {type(value).__name__}")


def is_numeric(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_float64(value: object) -> float:
    """Widen any numeric value to ``float``."""
    if not is_numeric(value):
        raise InvalidNumericTypeError(
            f"unsupported type for numeric comparison: {type(value).__name__}"
        )
    try:
        return float(value)
    except OverflowError as e:
        raise InvalidNumericTypeError("number too large for float") from e


def values_equal(left: object, right: object) -> bool:
    """Structural equality that respects JSON kinds.

    Plain ``==`` holds for ``True == 1``; here kinds must match first.
    Two ints compare exactly, other numbers as floats. Containers recurse.
    """
    try:
        left_kind, right_kind = kind_of(left), kind_of(right)
    except TypeMismatchError:
        return left == right
    if left_kind != right_kind:
        return False
    if left_kind == ValueKind.NUMBER:
        if isinstance(left, int) and isinstance(right, int):
            return left == right
        return to_float64(left) == to_float64(right)
    if left_kind == ValueKind.SEQUENCE:
        if len(left) != len(right):
            return False
        return all(values_equal(a, b) for a, b in zip(left, right))
    if left_kind == ValueKind.MAPPING:
        if left.keys() != right.keys():
            return False
        return all(values_equal(v, right[k]) for k, v in left.items())
    return left == right


def _reject_constant(name: str) -> float:
    raise DecodeError(f"JSON error: {name} is not a valid JSON value")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise DecodeError(f"JSON error: number out of range: {text}")
    return value


def loads_strict(content: str | bytes) -> object:
    """``json.loads`` that refuses NaN, Infinity and out-of-range floats.

    Raises :class:`json.JSONDecodeError` for malformed text and
    :class:`DecodeError` for the non-finite numbers ``json`` would accept.
    """
    return json.loads(
        content, parse_constant=_reject_constant, parse_float=_finite_float
    )


def parse_literal(value_str: str) -> object:
    """Parse a command-line value: JSON if possible, else the bare string.

    ``'quoted'`` text has its single quotes stripped, so ``'42'`` is the
    string ``"42"`` rather than the number.
    """
    value_str = value_str.strip()
    if not value_str:
        return ""

    try:
        return loads_strict(value_str)
    except (json.JSONDecodeError, DecodeError):
        pass

    if len(value_str) >= 2 and value_str[0] == "'" and value_str[-1] == "'":
        return value_str[1:-1]

    return value_str
