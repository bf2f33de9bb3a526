"""Tests for expiry date, CVV and free-text grammars."""

import pytest

from stringify import EditRequest, TextType, TextTypeConfig, display_value, format_edit
from stringify.plain import convert_date, extract_plain_value

CFG = TextTypeConfig()


def fmt(text_type, text, start, length, replacement, config=CFG):
    return format_edit(EditRequest(text, start, length, replacement), text_type, config)


# ── Expiry date ──────────────────────────────────────────────────────

def test_exp_date_typing(make_field, recorder):
    field = make_field(TextType.EXP_DATE)
    seen = []
    for ch in "0322":
        field.insert_text(ch)
        seen.append((field.text, field.host.get_selection()[0]))
    assert seen == [("0", 1), ("03/", 3), ("03/2", 4), ("03/22", 5)]
    assert recorder.count("did_filled") == 1


def test_exp_date_fifth_digit_rejected(make_field, recorder):
    field = make_field(TextType.EXP_DATE)
    field.type_text("03225")
    assert field.text == "03/22"
    assert recorder.count("did_filled") == 1


def test_exp_date_deletion_is_verbatim():
    result = fmt(TextType.EXP_DATE, "03/", 2, 1, "")
    assert result.new_text == "03"
    assert result.cursor == 2
    assert fmt(TextType.EXP_DATE, "03", 2, 0, "2").new_text == "03/2"


def test_exp_date_rejects_non_digits():
    assert fmt(TextType.EXP_DATE, "03/", 3, 0, "/").rejected


def test_exp_date_plain_value():
    assert extract_plain_value("03/22", TextType.EXP_DATE, CFG) == "0322"
    cfg = TextTypeConfig(date_format="yyyy-MM")
    assert extract_plain_value("03/22", TextType.EXP_DATE, cfg) == "2022-03"


def test_exp_date_unparsable_is_empty():
    assert extract_plain_value("03/2", TextType.EXP_DATE, CFG) == ""
    assert extract_plain_value("13/22", TextType.EXP_DATE, CFG) == ""


def test_exp_date_display_round_trip():
    plain = extract_plain_value("11/27", TextType.EXP_DATE, CFG)
    assert display_value(plain, TextType.EXP_DATE, CFG) == "11/27"


@pytest.mark.parametrize("text, source, target, expected", [
    ("03/22", "MM/yy", "MMyyyy", "032022"),
    ("03/22", "MM/yy", "M/yy", "3/22"),
    ("2022-03-15", "yyyy-MM-dd", "dd.MM.yy", "15.03.22"),
])
def test_convert_date(text, source, target, expected):
    assert convert_date(text, source, target) == expected


def test_convert_date_unsupported_field():
    assert convert_date("03/22", "MM/yy", "MMM yy") is None


# ── CVV ──────────────────────────────────────────────────────────────

def test_cvv_typing_fills_once(make_field, recorder):
    field = make_field(TextType.CVV)
    results = field.type_text("1234")
    assert field.text == "123"
    assert [r.filled for r in results] == [False, False, True, False]
    assert results[-1].rejected
    assert recorder.count("did_filled") == 1
    assert field.plain_value == "123"


def test_cvv_rejects_letters():
    assert fmt(TextType.CVV, "1", 1, 0, "x").rejected


def test_cvv_deletion():
    result = fmt(TextType.CVV, "123", 1, 1, "")
    assert result.new_text == "13"
    assert result.cursor == 1


# ── Free text ────────────────────────────────────────────────────────

def test_pattern_rejects_non_matching():
    cfg = TextTypeConfig(pattern="[A-Za-z0-9]", max_free_text_length=10)
    result = fmt(TextType.FREE_TEXT, "ab", 2, 0, "$", cfg)
    assert result.rejected
    assert result.new_text == "ab"


def test_pattern_accepts_each_matching_character():
    cfg = TextTypeConfig(pattern="[A-Za-z0-9]", max_free_text_length=10)
    result = fmt(TextType.FREE_TEXT, "", 0, 0, "a1", cfg)
    assert result.new_text == "a1"
    assert result.cursor == 2


def test_pattern_whole_replacement_match():
    cfg = TextTypeConfig(pattern=r"\d{3}")
    assert fmt(TextType.FREE_TEXT, "", 0, 0, "123", cfg).new_text == "123"
    assert fmt(TextType.FREE_TEXT, "", 0, 0, "12a", cfg).rejected


def test_free_text_length_limit_and_fill(make_field, recorder):
    field = make_field(TextType.FREE_TEXT, max_free_text_length=5)
    field.type_text("hello!")
    assert field.text == "hello"
    assert recorder.count("did_filled") == 1


def test_free_text_without_pattern_accepts_anything():
    result = fmt(TextType.FREE_TEXT, "a", 1, 0, " $ ")
    assert result.new_text == "a $ "


def test_free_text_deletion_caret_at_start():
    result = fmt(TextType.FREE_TEXT, "hello", 1, 3, "")
    assert result.new_text == "ho"
    assert result.cursor == 1


def test_free_text_plain_value_is_raw():
    assert extract_plain_value("  a b ", TextType.FREE_TEXT, CFG) == "  a b "
