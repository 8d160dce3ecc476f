"""Document façade: load a JSON object, then read and edit it by path."""

from __future__ import annotations

import copy
import json
from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import Any

from jsonmapper import _conditions, _navigate
from jsonmapper._navigate import PathLike
from jsonmapper._path import format_path
from jsonmapper._value import ValueKind, kind_of, loads_strict, to_float64, values_equal
from jsonmapper.errors import (
    DecodeError,
    EncodeError,
    JsonMapError,
    ReadError,
    TypeMismatchError,
    WriteError,
)

logger = getLogger(__name__)

_UINT32_MAX = 2**32 - 1
_UINT64_MAX = 2**64 - 1


@dataclass(frozen=True)
class FormatOptions:
    """Encoder settings used by :meth:`JsonMapper.to_json` and friends."""

    indent: int = 2
    sort_keys: bool = False
    ensure_ascii: bool = False


def _text(path: PathLike) -> str:
    return path if isinstance(path, str) else format_path(path)


def _decode(content: str | bytes) -> dict:
    try:
        parsed = loads_strict(content)
    except json.JSONDecodeError as e:
        raise DecodeError(f"JSON error: {e.msg} (line {e.lineno})") from e
    except UnicodeDecodeError as e:
        raise DecodeError(f"cannot decode bytes: {e.reason}") from e
    if not isinstance(parsed, dict):
        raise DecodeError(
            f"document root must be a JSON object, got {type(parsed).__name__}"
        )
    return parsed


class JsonMapper:
    """A JSON object that can be navigated and edited with path strings.

    Paths use dots for keys and either dots or brackets for list indexes::

        mapper.find("testData.sliced[0]")
        mapper.add("testData.s2[-1]", {"id": 4})   # append
        mapper.remove("testData.sliced.1")

    ``-1`` appends in :meth:`add` and addresses the last element in
    :meth:`remove`.
    """

    def __init__(
        self,
        data: dict | None = None,
        *,
        format_options: FormatOptions | None = None,
    ) -> None:
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise TypeMismatchError(
                f"document root must be a dict, got {type(data).__name__}"
            )
        self._data: dict = data
        self.format_options: FormatOptions = format_options or FormatOptions()

    # -- Construction ------------------------------------------------------

    @classmethod
    def from_str(
        cls, content: str, *, format_options: FormatOptions | None = None
    ) -> JsonMapper:
        return cls(_decode(content), format_options=format_options)

    @classmethod
    def from_bytes(
        cls, content: bytes, *, format_options: FormatOptions | None = None
    ) -> JsonMapper:
        return cls(_decode(bytes(content)), format_options=format_options)

    @classmethod
    def from_file(
        cls, file_path: str | Path, *, format_options: FormatOptions | None = None
    ) -> JsonMapper:
        try:
            content = Path(file_path).read_bytes()
        except OSError as e:
            raise ReadError(f"cannot read {file_path}: {e.strerror or e}") from e
        logger.debug("Loaded %d bytes from %s", len(content), file_path)
        return cls(_decode(content), format_options=format_options)

    @property
    def data(self) -> dict:
        """The root object. Edits made through it are edits to the document."""
        return self._data

    def copy(self) -> JsonMapper:
        """Return an independent deep copy of this document."""
        return type(self)(
            copy.deepcopy(self._data), format_options=self.format_options
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonMapper):
            return NotImplemented
        return values_equal(self._data, other._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"

    def __str__(self) -> str:
        return self.to_json()

    # -- Core operations ---------------------------------------------------

    def find(self, path: PathLike) -> Any:
        """Return the value at *path* (the whole document for ``""``)."""
        return _navigate.find(self._data, path)

    def add(self, path: PathLike, value: Any) -> None:
        """Insert or overwrite *value* at *path*, creating missing objects."""
        _navigate.add(self._data, path, value)
        logger.debug("Set value at %s", path)

    def remove(self, path: PathLike) -> Any:
        """Delete the value at *path* and return it."""
        removed = _navigate.remove(self._data, path)
        logger.debug("Removed value at %s", path)
        return removed

    def find_all_with_condition(
        self,
        path: PathLike,
        condition: dict,
        *,
        ignore_incomparable: bool = False,
    ) -> list[str]:
        """Return paths (relative to *path*) of leaves satisfying *condition*.

        Example: every number between 20 and 30 below ``testData``::

            mapper.find_all_with_condition(
                "testData", {"and": [{"gt": 20}, {"lt": 30}]}
            )
        """
        results = _conditions.find_all_with_condition(
            self._data, path, condition, ignore_incomparable=ignore_incomparable
        )
        logger.debug(
            "Condition %r matched %d leaves under %r", condition, len(results), path
        )
        return results

    # -- Serialization -----------------------------------------------------

    def _encode(self, indent: int | None) -> str:
        opts = self.format_options
        try:
            return json.dumps(
                self._data,
                indent=indent,
                separators=(",", ":") if indent is None else (",", ": "),
                sort_keys=opts.sort_keys,
                ensure_ascii=opts.ensure_ascii,
                allow_nan=False,
            )
        except (TypeError, ValueError) as e:
            raise EncodeError(f"failed to encode JSON: {e}") from e

    def to_json(self) -> str:
        """Compact JSON text of the whole document."""
        return self._encode(None)

    def to_pretty_json(self) -> str:
        """Indented JSON text of the whole document."""
        return self._encode(self.format_options.indent)

    def write_file(self, file_path: str | Path, pretty: bool = False) -> None:
        """Write the document to *file_path*, replacing any existing file."""
        content = self.to_pretty_json() if pretty else self.to_json()
        try:
            Path(file_path).write_text(content, encoding="utf-8")
        except OSError as e:
            raise WriteError(f"failed to write file: {e.strerror or e}") from e
        logger.debug("Wrote %d characters to %s", len(content), file_path)

    # -- Typed accessors ---------------------------------------------------

    def _find_kind(self, path: PathLike, kind: ValueKind, label: str) -> Any:
        value = self.find(path)
        try:
            actual = kind_of(value)
        except TypeMismatchError:
            actual = None
        if actual != kind:
            raise TypeMismatchError(f"value is not a {label}", path=_text(path))
        return value

    def _find_unsigned(self, path: PathLike, limit: int, label: str) -> int:
        value = self._find_kind(path, ValueKind.NUMBER, label)
        if value < 0 or value > limit:
            raise TypeMismatchError(
                f"value {value} does not fit in a {label}", path=_text(path)
            )
        return int(value)

    @staticmethod
    def _or(lookup: Callable[[PathLike], Any], path: PathLike, default: Any) -> Any:
        try:
            return lookup(path)
        except JsonMapError:
            return default

    def find_bool(self, path: PathLike) -> bool:
        return self._find_kind(path, ValueKind.BOOL, "bool")

    def find_str(self, path: PathLike) -> str:
        return self._find_kind(path, ValueKind.STRING, "string")

    def find_int(self, path: PathLike) -> int:
        """Numbers are truncated toward zero."""
        return int(self._find_kind(path, ValueKind.NUMBER, "int"))

    def find_float(self, path: PathLike) -> float:
        return to_float64(self._find_kind(path, ValueKind.NUMBER, "float"))

    def find_uint(self, path: PathLike) -> int:
        return self._find_unsigned(path, _UINT64_MAX, "uint")

    def find_uint32(self, path: PathLike) -> int:
        return self._find_unsigned(path, _UINT32_MAX, "uint32")

    def find_uint64(self, path: PathLike) -> int:
        return self._find_unsigned(path, _UINT64_MAX, "uint64")

    def find_list(self, path: PathLike) -> list:
        return self._find_kind(path, ValueKind.SEQUENCE, "list")

    def find_dict(self, path: PathLike) -> dict:
        return self._find_kind(path, ValueKind.MAPPING, "dict")

    def find_list_of_dicts(self, path: PathLike) -> list[dict]:
        items = self._find_kind(path, ValueKind.SEQUENCE, "list of dicts")
        for i, item in enumerate(items):
            if not isinstance(item, dict):
                raise TypeMismatchError(
                    f"element {i} is not a dict", path=_text(path)
                )
        return list(items)

    def find_dict_of_lists(self, path: PathLike) -> dict[str, list]:
        mapping = self._find_kind(path, ValueKind.MAPPING, "dict of lists")
        for key, value in mapping.items():
            if not isinstance(value, list):
                raise TypeMismatchError(
                    f"value for key {key!r} is not a list", path=_text(path)
                )
        return dict(mapping)

    def find_bool_or(self, path: PathLike, default: bool) -> bool:
        return self._or(self.find_bool, path, default)

    def find_str_or(self, path: PathLike, default: str) -> str:
        return self._or(self.find_str, path, default)

    def find_int_or(self, path: PathLike, default: int) -> int:
        return self._or(self.find_int, path, default)

    def find_float_or(self, path: PathLike, default: float) -> float:
        return self._or(self.find_float, path, default)

    def find_uint_or(self, path: PathLike, default: int) -> int:
        return self._or(self.find_uint, path, default)

    def find_uint32_or(self, path: PathLike, default: int) -> int:
        return self._or(self.find_uint32, path, default)

    def find_uint64_or(self, path: PathLike, default: int) -> int:
        return self._or(self.find_uint64, path, default)

    def find_list_or(self, path: PathLike, default: list) -> list:
        return self._or(self.find_list, path, default)

    def find_dict_or(self, path: PathLike, default: dict) -> dict:
        return self._or(self.find_dict, path, default)

    def find_list_of_dicts_or(self, path: PathLike, default: list) -> list[dict]:
        return self._or(self.find_list_of_dicts, path, default)

    def find_dict_of_lists_or(self, path: PathLike, default: dict) -> dict[str, list]:
        return self._or(self.find_dict_of_lists, path, default)
