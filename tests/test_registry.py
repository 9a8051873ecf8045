import pytest

from core.errors import InvalidDataError
from core.registry import (
    HiveRoot,
    ValueType,
    coerce_data,
    display_value_name,
    parse_hive,
    parse_value_type,
    split_key_path,
    store_value_name,
)


class TestHiveParsing:

    @pytest.mark.parametrize("name", ["LocalMachine", "HKLM", "HKEY_LOCAL_MACHINE", "hklm", "local_machine"])
    def test_local_machine_spellings(self, name):
        assert parse_hive(name) is HiveRoot.LOCAL_MACHINE

    def test_handle_values_match_windows(self):
        assert HiveRoot.CLASSES_ROOT.value == 0x80000000
        assert HiveRoot.DYN_DATA.value == 0x80000006

    def test_invalid_hive(self):
        with pytest.raises(ValueError) as exc_info:
            parse_hive("HKEY_NOWHERE")
        assert "LocalMachine" in str(exc_info.value)


class TestValueTypes:

    def test_parse_names_and_reg_prefix(self):
        assert parse_value_type("DWord") is ValueType.DWORD
        assert parse_value_type("REG_EXPAND_SZ") is ValueType.EXPAND_STRING
        assert parse_value_type("multistring") is ValueType.MULTI_STRING

    def test_invalid_type(self):
        with pytest.raises(ValueError):
            parse_value_type("REG_LINK")

    def test_unknown_code_reads_as_unknown(self):
        assert ValueType.from_code(6) is ValueType.UNKNOWN
        assert ValueType.from_code(4) is ValueType.DWORD
        assert ValueType.from_code(None) is ValueType.NONE


class TestKeyPaths:

    def test_both_delimiters(self):
        assert split_key_path("SOFTWARE\\MyCompany/App") == ("SOFTWARE", "MyCompany", "App")

    def test_redundant_delimiters_dropped(self):
        assert split_key_path("\\SOFTWARE\\\\MyCompany\\") == ("SOFTWARE", "MyCompany")

    def test_empty_is_root(self):
        assert split_key_path("") == ()
        assert split_key_path(None) == ()

    def test_default_value_names(self):
        assert store_value_name("(default)") == ""
        assert store_value_name("(Default)") == ""
        assert store_value_name("Port") == "Port"
        assert display_value_name("") == "(default)"


class TestCoercion:

    def test_dword_decimal_and_hex(self):
        assert coerce_data("8080", ValueType.DWORD) == 8080
        assert coerce_data("0x1F", ValueType.DWORD) == 31
        assert coerce_data(" 42 ", ValueType.DWORD) == 42
        assert coerce_data(7, ValueType.DWORD) == 7

    def test_dword_limits(self):
        assert coerce_data("4294967295", ValueType.DWORD) == 0xFFFFFFFF
        with pytest.raises(InvalidDataError):
            coerce_data("4294967296", ValueType.DWORD)
        assert coerce_data("4294967296", ValueType.QWORD) == 4294967296

    @pytest.mark.parametrize("data", ["abc", "-1", "1.5", "", True, "\u0668\u0660\u0668\u0660"])
    def test_dword_rejects_non_numeric(self, data):
        with pytest.raises(InvalidDataError):
            coerce_data(data, ValueType.DWORD)

    def test_qword_limit(self):
        assert coerce_data("18446744073709551615", ValueType.QWORD) == 2 ** 64 - 1
        with pytest.raises(InvalidDataError):
            coerce_data(str(2 ** 64), ValueType.QWORD)

    def test_multistring_split(self):
        assert coerce_data("a\nb\nc", ValueType.MULTI_STRING) == ["a", "b", "c"]
        assert coerce_data("a;b", ValueType.MULTI_STRING, separator=";") == ["a", "b"]
        assert coerce_data(("x", "y"), ValueType.MULTI_STRING) == ["x", "y"]
        assert coerce_data("", ValueType.MULTI_STRING) == []

    def test_binary_forms(self):
        assert coerce_data("01 02 ff", ValueType.BINARY) == b"\x01\x02\xff"
        assert coerce_data("0x01,0x02", ValueType.BINARY) == b"\x01\x02"
        assert coerce_data("de-ad-be-ef", ValueType.BINARY) == b"\xde\xad\xbe\xef"
        assert coerce_data("cafe", ValueType.BINARY) == b"\xca\xfe"
        assert coerce_data(b"\x00\x01", ValueType.BINARY) == b"\x00\x01"
        assert coerce_data([1, 2, 3], ValueType.BINARY) == b"\x01\x02\x03"
        assert coerce_data("1,2,3", ValueType.BINARY) == b"\x01\x02\x03"

    def test_binary_rejects_non_hex(self):
        with pytest.raises(InvalidDataError):
            coerce_data("zz", ValueType.BINARY)
        with pytest.raises(InvalidDataError):
            coerce_data([256], ValueType.BINARY)

    @pytest.mark.parametrize("data", ["abc", "0x123", "01 abc"])
    def test_binary_rejects_odd_length_tokens(self, data):
        with pytest.raises(InvalidDataError):
            coerce_data(data, ValueType.BINARY)

    def test_expand_string_kept_unexpanded(self):
        assert coerce_data("%SystemRoot%\\system32", ValueType.EXPAND_STRING) == "%SystemRoot%\\system32"

    def test_string_verbatim(self):
        assert coerce_data("  spaced  ", ValueType.STRING) == "  spaced  "

    def test_none_type(self):
        assert coerce_data(None, ValueType.NONE) is None
        assert coerce_data("", ValueType.NONE) is None

    def test_unknown_not_writable(self):
        with pytest.raises(InvalidDataError):
            coerce_data("x", ValueType.UNKNOWN)
