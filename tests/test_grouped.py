"""Tests for card number and IBAN grouping."""

from stringify import EditRequest, TextType, TextTypeConfig, display_value, format_edit
from stringify.plain import extract_plain_value

CFG = TextTypeConfig()


def fmt(text, start, length, replacement, text_type=TextType.CREDIT_CARD):
    return format_edit(EditRequest(text, start, length, replacement), text_type, CFG)


# ── Credit card ──────────────────────────────────────────────────────

def test_card_typing_and_fill_once(make_field, recorder):
    field = make_field(TextType.CREDIT_CARD)
    field.type_text("1234567890123456")
    assert field.text == "1234 5678 9012 3456"
    assert field.host.get_selection() == (19, 0)
    assert recorder.count("did_filled") == 1
    # filled fired on the 16th keystroke, right before its end-changing
    assert recorder.names[-2:] == ["did_filled", "did_end_changing"]


def test_card_seventeenth_digit_rejected(make_field, recorder):
    field = make_field(TextType.CREDIT_CARD)
    field.type_text("12345678901234567")
    assert field.text == "1234 5678 9012 3456"
    assert recorder.count("did_filled") == 1


def test_card_refill_after_shrink(make_field, recorder):
    field = make_field(TextType.CREDIT_CARD)
    field.type_text("1234567890123456")
    field.delete_backward()
    assert field.text == "1234 5678 9012 345"
    field.type_text("6")
    assert recorder.count("did_filled") == 2


def test_card_caret_after_new_group():
    result = fmt("1234", 4, 0, "5")
    assert result.new_text == "1234 5"
    assert result.cursor == 6


def test_card_insert_in_middle_regroups():
    result = fmt("1234 5678", 2, 0, "0")
    assert result.new_text == "1203 4567 8"
    assert result.cursor == 3


def test_card_rejects_letters():
    result = fmt("1234", 4, 0, "a")
    assert result.rejected
    assert result.new_text == "1234"


def test_card_bulk_replacement_must_be_digits():
    assert fmt("", 0, 0, "1234 56x8").rejected
    assert fmt("", 0, 0, "1234 5678").new_text == "1234 5678"


def test_card_deletion_is_verbatim():
    result = fmt("1234 5678", 4, 1, "")
    assert result.new_text == "12345678"
    assert result.cursor == 4
    assert not result.filled


def test_card_replace_selection_at_max_does_not_refill():
    full = "1234 5678 9012 3456"
    result = fmt(full, 0, 1, "9")
    assert result.new_text == "9234 5678 9012 3456"
    assert not result.filled


def test_card_plain_value():
    assert extract_plain_value("1234 5678 9012 3456", TextType.CREDIT_CARD, CFG) == "1234567890123456"
    assert display_value("1234567890123456", TextType.CREDIT_CARD, CFG) == "1234 5678 9012 3456"


# ── IBAN ─────────────────────────────────────────────────────────────

IBAN = "BY12BLBB12345678000012345678"


def test_iban_grouping():
    field_text = ""
    for ch in IBAN:
        result = fmt(field_text, len(field_text), 0, ch, TextType.IBAN)
        field_text = result.new_text
    assert field_text == "BY12 BLBB 1234 5678 0000 1234 5678"


def test_iban_fills_at_34_characters(make_field, recorder):
    field = make_field(TextType.IBAN)
    field.type_text("GB" + "1" * 32)
    assert len(field.text) == 42
    assert recorder.count("did_filled") == 1
    assert field.insert_text("9").rejected


def test_iban_rejects_punctuation():
    assert fmt("BY12", 4, 0, "-", TextType.IBAN).rejected


def test_iban_plain_value_upper_cased():
    assert extract_plain_value("by12 blbb 1234", TextType.IBAN, CFG) == "BY12BLBB1234"


def test_iban_noop_edit_is_idempotent():
    text = "BY12 BLBB 1234"
    result = fmt(text, 3, 0, "", TextType.IBAN)
    assert result.new_text == text
