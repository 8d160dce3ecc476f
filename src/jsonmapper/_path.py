"""Path parsing shared by the navigator and the condition evaluator."""

from __future__ import annotations

import re
from dataclasses import dataclass

_BRACKET_INDEX = re.compile(r"\[(-?[0-9]+)\]")
_INDEX_TOKEN = re.compile(r"[+-]?[0-9]+")

APPEND = -1


@dataclass(frozen=True)
class Key:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Index:
    position: int
    token: str  # original text; used as the key when the step meets a dict

    @property
    def is_append(self) -> bool:
        return self.position == APPEND

    def __str__(self) -> str:
        return self.token


PathStep = Key | Index


def brackets_to_dots(path: str) -> str:
    """Rewrite ``[N]`` accessors as ``.N`` segments.

    A bracket at the very start of *path* does not produce an empty leading
    segment: ``[0].a`` becomes ``0.a``.
    """
    converted = _BRACKET_INDEX.sub(r".\1", path)
    if path.startswith("[") and converted.startswith("."):
        converted = converted[1:]
    return converted


def parse_path(path: str) -> tuple[PathStep, ...]:
    """Split *path* into typed steps.

    Supports:
      a.b.c       (keys)
      a.b.2       (index written as a segment)
      a.b[2]      (bracket index)
      a.b[-1]     (append / last element sentinel)

    Numeric tokens become :class:`Index` steps; whether they address a list
    position or a dict key is decided during traversal.
    """
    if not path:
        return ()
    steps: list[PathStep] = []
    for token in brackets_to_dots(path).split("."):
        if _INDEX_TOKEN.fullmatch(token):
            steps.append(Index(int(token), token))
        else:
            steps.append(Key(token))
    return tuple(steps)


def format_path(steps: tuple[PathStep, ...] | list[PathStep]) -> str:
    """Render *steps* back to path text, using brackets for indexes."""
    out: list[str] = []
    for step in steps:
        if isinstance(step, Index):
            out.append(f"[{step.token}]")
        elif out:
            out.append(f".{step.name}")
        else:
            out.append(step.name)
    return "".join(out)
