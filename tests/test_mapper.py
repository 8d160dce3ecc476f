"""Tests for the JsonMapper document façade."""

import json

import pytest

from jsonmapper.errors import (
    DecodeError,
    EncodeError,
    IndexOutOfRangeError,
    InvalidNumericTypeError,
    JsonMapError,
    KeyNotFoundError,
    ReadError,
    TypeMismatchError,
    WriteError,
)
from jsonmapper.mapper import FormatOptions, JsonMapper

SAMPLE_JSON = '{"a": {"b": 1, "c": [10, 20, 30]}}'

TYPED_JSON = """\
{
    "flag": true,
    "name": "jsonmapper",
    "count": 42,
    "ratio": 3.9,
    "negative": -7,
    "big": 4294967296,
    "items": [1, 2, 3],
    "config": {"theme": "dark"},
    "people": [{"id": 1}, {"id": 2}],
    "mixed": [{"id": 1}, 2],
    "groups": {"odd": [1, 3], "even": [2, 4]}
}"""


class TestConstruction:
    def test_from_str(self):
        mapper = JsonMapper.from_str(SAMPLE_JSON)
        assert mapper.data == {"a": {"b": 1, "c": [10, 20, 30]}}

    def test_from_bytes(self):
        mapper = JsonMapper.from_bytes(SAMPLE_JSON.encode("utf-8"))
        assert mapper.find("a.b") == 1

    def test_from_file(self, tmp_path):
        path = tmp_path / "doc.json"
        path.write_text(SAMPLE_JSON, encoding="utf-8")
        assert JsonMapper.from_file(path).find("a.c[2]") == 30
        assert JsonMapper.from_file(str(path)).find("a.c[2]") == 30

    def test_empty_document(self):
        assert JsonMapper().data == {}

    def test_wraps_dict_without_copying(self):
        data = {"k": 1}
        mapper = JsonMapper(data)
        mapper.add("k", 2)
        assert data == {"k": 2}

    def test_non_dict_root(self):
        with pytest.raises(TypeMismatchError):
            JsonMapper([1, 2])

    def test_malformed_json(self):
        with pytest.raises(DecodeError):
            JsonMapper.from_str('{"a": ')

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            JsonMapper.from_str("not json")

    def test_top_level_array_rejected(self):
        with pytest.raises(DecodeError) as exc:
            JsonMapper.from_str("[1, 2, 3]")
        assert "object" in str(exc.value)

    def test_invalid_utf8_bytes(self):
        with pytest.raises(DecodeError):
            JsonMapper.from_bytes(b'{"a": "\xff"}')

    @pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_constants_rejected(self, constant):
        with pytest.raises(DecodeError):
            JsonMapper.from_str(f'{{"a": {constant}}}')

    def test_out_of_range_float_rejected(self):
        with pytest.raises(DecodeError):
            JsonMapper.from_str('{"a": 1e400}')

    def test_huge_integer_kept_exact(self):
        digits = "1" + "0" * 400
        mapper = JsonMapper.from_str(f'{{"a": {digits}}}')
        assert mapper.find("a") == 10**400
        assert mapper.to_json() == f'{{"a":{digits}}}'

    def test_missing_file(self, tmp_path):
        with pytest.raises(ReadError):
            JsonMapper.from_file(tmp_path / "absent.json")

    def test_read_error_is_os_error(self, tmp_path):
        with pytest.raises(OSError):
            JsonMapper.from_file(tmp_path / "absent.json")

    def test_equality_respects_bool_kind(self):
        assert JsonMapper.from_str('{"a": 1}') != JsonMapper.from_str('{"a": true}')
        assert JsonMapper.from_str('{"a": 1}') == JsonMapper.from_str('{"a": 1.0}')

    def test_repr_of_unencodable_document(self):
        mapper = JsonMapper()
        mapper.add("x", float("nan"))
        assert repr(mapper) == "JsonMapper({'x': nan})"

    def test_copy_is_independent(self):
        mapper = JsonMapper.from_str(SAMPLE_JSON)
        clone = mapper.copy()
        clone.add("a.c[-1]", 40)
        assert mapper.find("a.c") == [10, 20, 30]
        assert clone.find("a.c") == [10, 20, 30, 40]


class TestScenario:
    """find / add / remove / query on one document, in order."""

    def test_walkthrough(self):
        mapper = JsonMapper.from_str(SAMPLE_JSON)
        assert mapper.find("a.c[1]") == 20

        mapper.add("a.c[-1]", 40)
        assert mapper.find("a.c") == [10, 20, 30, 40]

        assert mapper.remove("a.c.0") == 10
        assert mapper.find("a.c") == [20, 30, 40]

        assert mapper.find_all_with_condition("a", {"gt": 25}) == ["c[1]", "c[2]"]

    def test_remove_then_find_fails(self):
        mapper = JsonMapper.from_str(SAMPLE_JSON)
        mapper.remove("a.b")
        with pytest.raises(KeyNotFoundError):
            mapper.find("a.b")

    def test_dot_and_bracket_agree(self):
        mapper = JsonMapper.from_str(SAMPLE_JSON)
        assert mapper.find("a.c[2]") == mapper.find("a.c.2")

    def test_add_dict_to_list(self):
        mapper = JsonMapper.from_str('{"s2": [{"id": 1}]}')
        mapper.add("s2[-1]", {"id": 2, "name": "diana"})
        assert mapper.find("s2[1].name") == "diana"

    def test_query_with_incomparable_leaves(self):
        mapper = JsonMapper.from_str('{"n": 5, "s": "x", "l": [1, 9]}')
        assert mapper.find_all_with_condition(
            "", {"gt": 4}, ignore_incomparable=True
        ) == ["n", "l[1]"]


class TestSerialization:
    def test_compact(self):
        mapper = JsonMapper.from_str(SAMPLE_JSON)
        assert mapper.to_json() == '{"a":{"b":1,"c":[10,20,30]}}'

    def test_str_is_compact(self):
        mapper = JsonMapper.from_str(SAMPLE_JSON)
        assert str(mapper) == mapper.to_json()

    def test_pretty_uses_two_spaces(self):
        mapper = JsonMapper.from_str('{"a": {"b": 1}}')
        assert mapper.to_pretty_json() == '{\n  "a": {\n    "b": 1\n  }\n}'

    def test_custom_indent(self):
        mapper = JsonMapper.from_str(
            '{"a": 1}', format_options=FormatOptions(indent=4)
        )
        assert mapper.to_pretty_json() == '{\n    "a": 1\n}'

    def test_sort_keys(self):
        mapper = JsonMapper.from_str(
            '{"b": 2, "a": 1}', format_options=FormatOptions(sort_keys=True)
        )
        assert mapper.to_json() == '{"a":1,"b":2}'

    def test_keeps_non_ascii(self):
        mapper = JsonMapper.from_str('{"name": "café"}')
        assert "café" in mapper.to_json()

    def test_ensure_ascii(self):
        mapper = JsonMapper.from_str(
            '{"name": "café"}', format_options=FormatOptions(ensure_ascii=True)
        )
        assert mapper.to_json() == '{"name":"caf\\u00e9"}'

    def test_round_trip(self):
        mapper = JsonMapper.from_str(TYPED_JSON)
        assert JsonMapper.from_str(mapper.to_json()) == mapper

    def test_unencodable_value(self):
        mapper = JsonMapper()
        mapper.add("s", {1, 2})
        with pytest.raises(EncodeError):
            mapper.to_json()

    def test_nan_rejected(self):
        mapper = JsonMapper()
        mapper.add("x", float("nan"))
        with pytest.raises(EncodeError):
            mapper.to_pretty_json()

    def test_write_file_compact(self, tmp_path):
        path = tmp_path / "out.json"
        JsonMapper.from_str(SAMPLE_JSON).write_file(path)
        assert path.read_text(encoding="utf-8") == '{"a":{"b":1,"c":[10,20,30]}}'

    def test_write_file_pretty_overwrites(self, tmp_path):
        path = tmp_path / "out.json"
        path.write_text("old content", encoding="utf-8")
        JsonMapper.from_str('{"a": 1}').write_file(path, pretty=True)
        assert path.read_text(encoding="utf-8") == '{\n  "a": 1\n}'

    def test_write_file_then_load(self, tmp_path):
        path = tmp_path / "out.json"
        mapper = JsonMapper.from_str(SAMPLE_JSON)
        mapper.add("a.d", "new")
        mapper.write_file(path, pretty=True)
        assert JsonMapper.from_file(path) == mapper

    def test_write_error(self, tmp_path):
        with pytest.raises(WriteError):
            JsonMapper.from_str(SAMPLE_JSON).write_file(tmp_path)


class TestTypedAccessors:
    @pytest.fixture
    def mapper(self):
        return JsonMapper.from_str(TYPED_JSON)

    def test_bool(self, mapper):
        assert mapper.find_bool("flag") is True
        with pytest.raises(TypeMismatchError):
            mapper.find_bool("count")

    def test_str(self, mapper):
        assert mapper.find_str("name") == "jsonmapper"
        with pytest.raises(TypeMismatchError):
            mapper.find_str("flag")

    def test_int(self, mapper):
        assert mapper.find_int("count") == 42
        assert mapper.find_int("ratio") == 3

    def test_int_rejects_bool(self, mapper):
        with pytest.raises(TypeMismatchError):
            mapper.find_int("flag")

    def test_float(self, mapper):
        assert mapper.find_float("ratio") == 3.9
        value = mapper.find_float("count")
        assert value == 42.0
        assert isinstance(value, float)

    def test_float_too_large(self):
        mapper = JsonMapper.from_str('{"a": 1' + "0" * 400 + "}")
        with pytest.raises(InvalidNumericTypeError):
            mapper.find_float("a")
        assert mapper.find_float_or("a", -1.0) == -1.0

    def test_uint(self, mapper):
        assert mapper.find_uint("count") == 42
        with pytest.raises(TypeMismatchError):
            mapper.find_uint("negative")

    def test_uint32(self, mapper):
        assert mapper.find_uint32("count") == 42
        with pytest.raises(TypeMismatchError):
            mapper.find_uint32("big")

    def test_uint64(self, mapper):
        assert mapper.find_uint64("big") == 4294967296
        with pytest.raises(TypeMismatchError):
            mapper.find_uint64("negative")

    def test_list(self, mapper):
        assert mapper.find_list("items") == [1, 2, 3]
        with pytest.raises(TypeMismatchError):
            mapper.find_list("config")

    def test_dict(self, mapper):
        assert mapper.find_dict("config") == {"theme": "dark"}
        with pytest.raises(TypeMismatchError):
            mapper.find_dict("items")

    def test_list_of_dicts(self, mapper):
        assert mapper.find_list_of_dicts("people") == [{"id": 1}, {"id": 2}]
        with pytest.raises(TypeMismatchError):
            mapper.find_list_of_dicts("mixed")

    def test_dict_of_lists(self, mapper):
        assert mapper.find_dict_of_lists("groups") == {"odd": [1, 3], "even": [2, 4]}
        with pytest.raises(TypeMismatchError):
            mapper.find_dict_of_lists("config")

    def test_missing_path_propagates(self, mapper):
        with pytest.raises(KeyNotFoundError):
            mapper.find_str("missing")
        with pytest.raises(IndexOutOfRangeError):
            mapper.find_int("items[9]")

    def test_type_mismatch_carries_path(self, mapper):
        with pytest.raises(TypeMismatchError) as exc:
            mapper.find_bool("config.theme")
        assert exc.value.path == "config.theme"
        assert isinstance(exc.value, JsonMapError)

    def test_or_variants_return_value(self, mapper):
        assert mapper.find_bool_or("flag", False) is True
        assert mapper.find_str_or("name", "") == "jsonmapper"
        assert mapper.find_int_or("count", 0) == 42
        assert mapper.find_float_or("ratio", 0.0) == 3.9
        assert mapper.find_uint_or("count", 0) == 42
        assert mapper.find_uint32_or("count", 0) == 42
        assert mapper.find_uint64_or("big", 0) == 4294967296
        assert mapper.find_list_or("items", []) == [1, 2, 3]
        assert mapper.find_dict_or("config", {}) == {"theme": "dark"}
        assert mapper.find_list_of_dicts_or("people", []) == [{"id": 1}, {"id": 2}]
        assert mapper.find_dict_of_lists_or("groups", {}) == {
            "odd": [1, 3],
            "even": [2, 4],
        }

    def test_or_variants_return_default(self, mapper):
        assert mapper.find_bool_or("missing", False) is False
        assert mapper.find_str_or("count", "fallback") == "fallback"
        assert mapper.find_int_or("flag", -1) == -1
        assert mapper.find_float_or("name", 1.5) == 1.5
        assert mapper.find_uint_or("negative", 0) == 0
        assert mapper.find_uint32_or("big", 7) == 7
        assert mapper.find_uint64_or("items[10]", 1) == 1
        assert mapper.find_list_or("items.x", ["d"]) == ["d"]
        assert mapper.find_dict_or("items", {"d": 1}) == {"d": 1}
        assert mapper.find_list_of_dicts_or("mixed", []) == []
        assert mapper.find_dict_of_lists_or("config", {}) == {}

    def test_round_trip_through_json_module(self, mapper):
        assert json.loads(mapper.to_json()) == json.loads(TYPED_JSON)
