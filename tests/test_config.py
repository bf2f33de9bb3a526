"""Tests for the dict/YAML config loader and engine factory."""

import logging

import pytest

from stringify import TextType, TextTypeConfig, create_engine, load_config, load_from_yaml


def test_defaults():
    text_type, config = load_config({})
    assert text_type is TextType.AMOUNT
    assert config == TextTypeConfig()
    assert config.max_integer_digits == 10
    assert config.decimal_separator == ","
    assert config.date_format == "MMyy"
    assert config.max_free_text_length == 100
    assert config.pattern is None
    assert config.error_display_duration == 1.0


def test_camel_case_keys_nested():
    text_type, config = load_config({"stringify": {
        "textType": "creditCard",
        "currencyMark": "BYN",
        "maxIntegerDigits": "6",
        "useGrouping": False,
        "errorDisplayDuration": 2,
    }})
    assert text_type is TextType.CREDIT_CARD
    assert config.currency_mark == "BYN"
    assert config.max_integer_digits == 6
    assert config.use_grouping is False
    assert config.error_display_duration == 2.0


def test_snake_case_and_legacy_names():
    text_type, config = load_config({"type": "none", "need_grouping_separator": False})
    assert text_type is TextType.FREE_TEXT
    assert config.use_grouping is False


def test_unknown_keys_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="stringify.config"):
        load_config({"lineColor": "red"})
    assert "lineColor" in caplog.text


def test_invalid_values_raise():
    with pytest.raises(ValueError):
        load_config({"decimalSeparator": " "})
    with pytest.raises(ValueError):
        load_config({"pattern": "[unclosed"})
    with pytest.raises(ValueError):
        load_config({"textType": "phone"})


@pytest.mark.parametrize("name, expected", [
    ("amount", TextType.AMOUNT),
    ("credit_card", TextType.CREDIT_CARD),
    ("IBAN", TextType.IBAN),
    ("exp-date", TextType.EXP_DATE),
    ("CVV", TextType.CVV),
    ("freeText", TextType.FREE_TEXT),
])
def test_text_type_parse(name, expected):
    assert TextType.parse(name) is expected


def test_load_from_yaml(tmp_path):
    path = tmp_path / "field.yaml"
    path.write_text(
        "stringify:\n"
        "  textType: amount\n"
        "  currencyMark: EUR\n"
        "  decimalSeparator: '.'\n"
        "  groupingSeparator: ','\n"
        "  maxFractionDigits: 3\n"
    )
    text_type, config = load_from_yaml(path)
    assert text_type is TextType.AMOUNT
    assert config.decimal_separator == "."
    assert config.grouping_separator == ","
    assert config.max_fraction_digits == 3


def test_create_engine():
    field = create_engine({"textType": "cvv"})
    assert field.text_type is TextType.CVV
    field.type_text("999")
    assert field.plain_value == "999"
