import pytest

from chat_messenger.utils import is_blank, parse_id, parse_id_list, require_text


@pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
def test_is_blank_detects_empty_values(value):
    assert is_blank(value)


def test_require_text_strips_value():
    assert require_text("  alice ", "Enter a login") == "alice"


def test_require_text_raises_with_message():
    with pytest.raises(ValueError, match="Enter a login"):
        require_text("  ", "Enter a login")


@pytest.mark.parametrize("text", ["", "abc", "0", "-3", "1.5"])
def test_parse_id_rejects_invalid_ids(text):
    with pytest.raises(ValueError, match="bad id"):
        parse_id(text, "bad id")


def test_parse_id_accepts_padded_integer():
    assert parse_id(" 42 ", "bad id") == 42


def test_parse_id_list_skips_blank_items():
    assert parse_id_list("2, ,5,, 7") == [2, 5, 7]


def test_parse_id_list_empty_input():
    assert parse_id_list("   ") == []


def test_parse_id_list_reports_bad_item():
    with pytest.raises(ValueError, match="Invalid participant id: x"):
        parse_id_list("2, x")
