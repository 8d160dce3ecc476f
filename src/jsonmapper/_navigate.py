"""Read, write and delete values in a decoded JSON tree by path."""

from __future__ import annotations

from jsonmapper._path import Index, Key, PathStep, format_path, parse_path
from jsonmapper.errors import (
    IndexOutOfRangeError,
    InvalidIndexError,
    InvalidPathError,
    KeyNotFoundError,
    TypeMismatchError,
)

PathLike = str | tuple[PathStep, ...]


def _resolve(path: PathLike) -> tuple[tuple[PathStep, ...], str]:
    """Return (steps, text) for a path given either as text or as steps."""
    if isinstance(path, str):
        return parse_path(path), path
    steps = tuple(path)
    return steps, format_path(steps)


def _mapping_key(step: PathStep) -> str:
    # Index steps meeting a dict are looked up by their original text.
    return step.name if isinstance(step, Key) else step.token


def _sequence_position(seq: list, step: PathStep, text: str) -> int:
    if isinstance(step, Key):
        raise InvalidIndexError(f"invalid array index: {step.name!r}", path=text)
    if not 0 <= step.position < len(seq):
        raise IndexOutOfRangeError(
            f"array index out of range: {step.position} (length {len(seq)})",
            path=text,
        )
    return step.position


def _descend(current: object, step: PathStep, text: str) -> object:
    """Move one step down from a container, raising on a missing target."""
    if isinstance(current, dict):
        key = _mapping_key(step)
        if key not in current:
            raise KeyNotFoundError(f"key not found: {key!r}", path=text)
        return current[key]
    if isinstance(current, list):
        return current[_sequence_position(current, step, text)]
    raise TypeMismatchError(
        f"cannot step into {type(current).__name__} with {step}", path=text
    )


def find(root: object, path: PathLike) -> object:
    """Return the value at *path* below *root*.

    An empty path returns *root*. When a scalar is reached before the path is
    exhausted the scalar itself is returned and the remaining steps are
    ignored.
    """
    steps, text = _resolve(path)
    current = root
    for step in steps:
        if not isinstance(current, (dict, list)):
            return current
        current = _descend(current, step, text)
    return current


def add(root: dict, path: PathLike, value: object) -> None:
    """Set *value* at *path*, creating intermediate dicts as needed.

    On a list the final step either overwrites an existing position or, for
    ``-1``, appends. Lists are never created implicitly.
    """
    steps, text = _resolve(path)
    if not steps:
        raise InvalidPathError("cannot replace the document root", path=text)

    current: object = root
    for i, step in enumerate(steps[:-1]):
        if isinstance(current, dict):
            key = _mapping_key(step)
            if key not in current:
                # Check the rest of the prefix before creating anything.
                for pending in steps[i:-1]:
                    if isinstance(pending, Index):
                        raise InvalidPathError(
                            f"cannot create a sequence for index {pending}",
                            path=text,
                        )
                current[key] = {}
            current = current[key]
        else:
            current = _descend(current, step, text)

    last = steps[-1]
    if isinstance(current, dict):
        current[_mapping_key(last)] = value
    elif isinstance(current, list):
        if isinstance(last, Index) and last.is_append:
            current.append(value)
        else:
            current[_sequence_position(current, last, text)] = value
    else:
        raise TypeMismatchError(
            f"cannot set {last} on {type(current).__name__}", path=text
        )


def remove(root: dict, path: PathLike) -> object:
    """Delete the value at *path* and return it.

    Removing from a list shifts the following elements down; ``-1`` removes
    the last element. Every step before the last must resolve to a container.
    """
    steps, text = _resolve(path)
    if not steps:
        raise InvalidPathError("cannot remove the document root", path=text)

    current: object = root
    for step in steps[:-1]:
        current = _descend(current, step, text)

    last = steps[-1]
    if isinstance(current, dict):
        key = _mapping_key(last)
        if key not in current:
            raise KeyNotFoundError(f"key not found: {key!r}", path=text)
        return current.pop(key)
    if isinstance(current, list):
        if isinstance(last, Index) and last.is_append and current:
            return current.pop()
        return current.pop(_sequence_position(current, last, text))
    raise TypeMismatchError(
        f"cannot remove {last} from {type(current).__name__}", path=text
    )
