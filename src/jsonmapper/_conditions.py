"""Condition queries over every leaf of a JSON subtree.

A condition is either a comparison map::

    {"gt": 20}

or a single logical operator over a list of comparison maps::

    {"and": [{"gt": 20}, {"lt": 30}]}

Comparison operators: eq, neq, lt, lte, gt, gte.
Logical operators: and, or, xor, nor (upper-case spellings are accepted).
"""

from __future__ import annotations

from jsonmapper._navigate import PathLike, find
from jsonmapper._value import is_numeric, kind_of, to_float64, values_equal
from jsonmapper.errors import (
    InvalidConditionError,
    InvalidNumericTypeError,
    UnsupportedComparisonError,
    UnsupportedOperatorError,
)

_ORDERING = {
    "lt": lambda a, b: a < b,
    "lte": lambda a, b: a <= b,
    "gt": lambda a, b: a > b,
    "gte": lambda a, b: a >= b,
}

LOGICAL_OPERATORS = ("and", "or", "xor", "nor")
_LOGICAL_SPELLINGS = {
    **{op: op for op in LOGICAL_OPERATORS},
    **{op.upper(): op for op in LOGICAL_OPERATORS},
}
COMPARISON_OPERATORS = ("eq", "neq", *_ORDERING)


def check_condition(value: object, op: str, operand: object) -> bool:
    """Apply a single comparison operator to *value*."""
    if op == "eq":
        return values_equal(value, operand)
    if op == "neq":
        # Different kinds are never equal, even 5 and "5".
        if kind_of(value) != kind_of(operand):
            return True
        return not values_equal(value, operand)
    if op in _ORDERING:
        if not (is_numeric(value) and is_numeric(operand)):
            raise UnsupportedComparisonError(
                f"comparison {op} not supported for "
                f"{type(value).__name__} and {type(operand).__name__}"
            )
        return _ORDERING[op](to_float64(value), to_float64(operand))
    raise UnsupportedOperatorError(f"unsupported operation: {op}")


def _check_all(value: object, comparisons: object) -> bool:
    """Every ``op: operand`` pair of a comparison map must hold."""
    if not isinstance(comparisons, dict) or not comparisons:
        raise InvalidConditionError(f"invalid comparison: {comparisons!r}")
    for op, operand in comparisons.items():
        if not check_condition(value, op, operand):
            return False
    return True


def _is_logical(condition: dict) -> bool:
    return all(
        key in _LOGICAL_SPELLINGS and isinstance(sub, list)
        for key, sub in condition.items()
    )


def validate_condition(condition: object) -> None:
    """Check the shape and operator names of *condition* without evaluating it."""
    if not isinstance(condition, dict) or not condition:
        raise InvalidConditionError(f"invalid conditions format: {condition!r}")
    if _is_logical(condition):
        comparisons = [sub for subs in condition.values() for sub in subs]
    else:
        comparisons = [condition]
    for comparison in comparisons:
        if not isinstance(comparison, dict) or not comparison:
            raise InvalidConditionError(f"invalid comparison: {comparison!r}")
        for op in comparison:
            if op not in COMPARISON_OPERATORS:
                raise UnsupportedOperatorError(f"unsupported operation: {op}")


def evaluate_condition(value: object, condition: dict) -> bool:
    """Evaluate *condition* against a single leaf *value*."""
    if not isinstance(condition, dict) or not condition:
        raise InvalidConditionError(f"invalid conditions format: {condition!r}")
    if not _is_logical(condition):
        return _check_all(value, condition)

    for logical_op, subconditions in condition.items():
        op = _LOGICAL_SPELLINGS[logical_op]
        if op == "and":
            if not all(_check_all(value, sub) for sub in subconditions):
                return False
        elif op == "or":
            if not any(_check_all(value, sub) for sub in subconditions):
                return False
        elif op == "xor":
            satisfied = sum(1 for sub in subconditions if _check_all(value, sub))
            if satisfied != 1:
                return False
        elif op == "nor":
            if any(_check_all(value, sub) for sub in subconditions):
                return False
    return True


def _walk(
    current: object,
    current_path: str,
    condition: dict,
    ignore_incomparable: bool,
    results: list[str],
) -> None:
    if isinstance(current, dict):
        for key, child in current.items():
            child_path = f"{current_path}.{key}" if current_path else str(key)
            _walk(child, child_path, condition, ignore_incomparable, results)
    elif isinstance(current, list):
        for i, child in enumerate(current):
            child_path = f"{current_path}[{i}]"
            _walk(child, child_path, condition, ignore_incomparable, results)
    else:
        try:
            satisfied = evaluate_condition(current, condition)
        except (UnsupportedComparisonError, InvalidNumericTypeError):
            if not ignore_incomparable:
                raise
            satisfied = False
        if satisfied:
            results.append(current_path)


def find_all_with_condition(
    root: object,
    start_path: PathLike,
    condition: dict,
    *,
    ignore_incomparable: bool = False,
) -> list[str]:
    """Return the paths of all leaves under *start_path* satisfying *condition*.

    Paths are relative to the start node: dict children add ``.key`` (no
    leading dot) and list elements add ``[i]``. With *ignore_incomparable*,
    leaves that cannot be ordered against the operand count as not matching
    instead of aborting the query.
    """
    validate_condition(condition)
    start = find(root, start_path)
    results: list[str] = []
    _walk(start, "", condition, ignore_incomparable, results)
    return results
