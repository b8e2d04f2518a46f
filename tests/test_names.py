import pytest

from signature_etl.names import (
    build_keys,
    format_display_name,
    normalize_part,
    parse_combined_name,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("  Jane ", "jane"),
        ("O'Brien", "o'brien"),
        ("Smith-Jones", "smith-jones"),
        ("Mary Anne", "maryanne"),
        ("J. R. R.", "jrr"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_part(raw, expected):
    assert normalize_part(raw) == expected


@pytest.mark.parametrize("raw", ["  Jane ", "Dr. O'Neil-Ray", "ÉLISE 2nd", "", "--"])
def test_normalize_part_is_idempotent(raw):
    once = normalize_part(raw)
    assert normalize_part(once) == once


def test_build_keys_standard_forms_in_priority_order():
    assert build_keys("Jane", "Smith") == ["jane|smith", "smith|jane", "janesmith", "smithjane"]


def test_build_keys_empty_when_both_empty():
    assert build_keys("", "") == []
    assert build_keys(None, "  ") == []


def test_build_keys_needs_both_parts():
    assert build_keys("Jane", "") == []


def test_build_keys_hyphenated_last_name():
    keys = build_keys("Jane", "Smith-Jones")
    assert keys[0] == "jane|smith-jones"
    assert "jane|smith" in keys
    assert "jane|jones" in keys
    assert "jones|jane" in keys


def test_build_keys_hyphenated_first_name():
    keys = build_keys("Mary-Kate", "Olsen")
    assert "mary|olsen" in keys
    assert "olsen|kate" in keys


def test_build_keys_has_no_duplicates():
    keys = build_keys("Ann", "Ann")
    assert len(keys) == len(set(keys))


@pytest.mark.parametrize(
    "raw,first,last",
    [
        ("Smith, Jane", "Jane", "Smith"),
        ("SMITH,JANE", "JANE", "SMITH"),
        ("Jane Mary Smith", "Jane", "Smith"),
        ("Jane Smith", "Jane", "Smith"),
        ('"Jane Smith"', "Jane", "Smith"),
        ("Jane", "Jane", ""),
        ("Smith,", "", "Smith"),
        ("", "", ""),
        (None, "", ""),
    ],
)
def test_parse_combined_name(raw, first, last):
    parsed = parse_combined_name(raw)
    assert parsed == (first, last)
    assert parsed.first == first
    assert parsed.last == last


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("JANE", "Jane"),
        ("mary anne", "Mary Anne"),
        ("smith-JONES", "Smith-Jones"),
        ("  o'brien ", "O'brien"),
        ("", ""),
    ],
)
def test_format_display_name(raw, expected):
    assert format_display_name(raw) == expected
