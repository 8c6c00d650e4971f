"""Tests for language code validation."""

import pytest
from django.core.exceptions import ValidationError

from django_conference_program.programs.languages import (
    DUPLICATE_MESSAGE,
    FORMAT_MESSAGE,
    UNKNOWN_MESSAGE,
    DuplicateLanguageError,
    LanguageFormatError,
    LanguageSelection,
    UnknownLanguageError,
    parse_languages,
    split_languages,
)


class FakeRegistry:
    """Registry that only knows a handful of codes."""

    names = {"en": "English", "de": "German"}

    def is_valid_code(self, code: str) -> bool:
        return code in self.names

    def display_name(self, code: str) -> str:
        return self.names[code]


def test_split_languages_trims_and_lowercases():
    assert split_languages(" EN, De ,es") == ["en", "de", "es"]


def test_split_languages_blank_values():
    assert split_languages("") == []
    assert split_languages("   ") == []
    assert split_languages(None) == []


def test_parse_languages_normalizes_and_keeps_order():
    selection = parse_languages("en,De, ES, ru,el")
    assert selection.codes == ("en", "de", "es", "ru", "el")
    assert str(selection) == "en,de,es,ru,el"


def test_parse_languages_display_names():
    selection = parse_languages("en,de,fr,ru,zh")
    assert selection.display_names == ["English", "German", "French", "Russian", "Chinese"]
    assert selection.names["de"] == "German"


def test_parse_languages_empty_is_valid():
    assert parse_languages("") == LanguageSelection()


@pytest.mark.parametrize("value", ["eng, De es", "en,", "e1", "en;de", "ñe"])
def test_parse_languages_rejects_malformed_tokens(value):
    with pytest.raises(LanguageFormatError) as exc_info:
        parse_languages(value)
    assert exc_info.value.messages == [FORMAT_MESSAGE]


def test_parse_languages_rejects_duplicates():
    with pytest.raises(DuplicateLanguageError) as exc_info:
        parse_languages("en,de,es,en")
    assert exc_info.value.messages == [DUPLICATE_MESSAGE]


def test_parse_languages_duplicates_detected_after_normalization():
    with pytest.raises(DuplicateLanguageError):
        parse_languages("en, EN")


def test_parse_languages_rejects_unknown_codes():
    with pytest.raises(UnknownLanguageError) as exc_info:
        parse_languages("en,hh,yu,zi,oo")
    assert exc_info.value.messages == [UNKNOWN_MESSAGE]
    assert exc_info.value.codes == ["hh", "yu", "zi", "oo"]


def test_format_check_runs_before_duplicate_check():
    with pytest.raises(LanguageFormatError):
        parse_languages("en,en,eng")


def test_duplicate_check_runs_before_registry_check():
    with pytest.raises(DuplicateLanguageError):
        parse_languages("hh,hh")


def test_language_errors_are_validation_errors():
    with pytest.raises(ValidationError):
        parse_languages("english")


def test_parse_languages_uses_given_registry():
    assert parse_languages("DE", registry=FakeRegistry()).display_names == ["German"]
    with pytest.raises(UnknownLanguageError):
        parse_languages("fr", registry=FakeRegistry())
