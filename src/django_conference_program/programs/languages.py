"""Validation of comma-separated ISO 639-1 language code lists.

A program stores its languages as a single string such as ``"en,de,es"``.
User input is tolerant of surrounding whitespace and mixed case; validation
normalizes it and rejects, in this order, malformed tokens, repeated codes
and codes unknown to the ISO 639-1 registry.  Only the first failing check
is reported so error messages stay deterministic.
"""

import re
from dataclasses import dataclass, field
from typing import Protocol

import pycountry
from django.core.exceptions import ValidationError

FORMAT_MESSAGE = "must be two letters separated by commas"
DUPLICATE_MESSAGE = "can't be repeated"
UNKNOWN_MESSAGE = "must be ISO 639-1 valid codes"

_CODE_RE = re.compile(r"[a-z]{2}")


class LanguageFormatError(ValidationError):
    """A token is not exactly two alphabetic characters."""

    def __init__(self, message: str = FORMAT_MESSAGE, code: str = "language_format", params: dict | None = None) -> None:
        super().__init__(message, code=code, params=params)


class DuplicateLanguageError(ValidationError):
    """A normalized language code appears more than once."""

    def __init__(
        self, message: str = DUPLICATE_MESSAGE, code: str = "language_duplicate", params: dict | None = None
    ) -> None:
        super().__init__(message, code=code, params=params)


class UnknownLanguageError(ValidationError):
    """One or more normalized codes are not ISO 639-1 codes.

    The offending codes are kept in ``params["codes"]``.
    """

    def __init__(self, message: str = UNKNOWN_MESSAGE, code: str = "language_unknown", params: dict | None = None) -> None:
        super().__init__(message, code=code, params=params)

    @property
    def codes(self) -> list[str]:
        return list((self.params or {}).get("codes", ()))


class LanguageRegistry(Protocol):
    """Lookup of ISO 639-1 codes and their display names."""

    def is_valid_code(self, code: str) -> bool: ...

    def display_name(self, code: str) -> str: ...


class PycountryLanguageRegistry:
    """ISO 639-1 registry backed by the ``pycountry`` language database."""

    def is_valid_code(self, code: str) -> bool:
        return pycountry.languages.get(alpha_2=code) is not None

    def display_name(self, code: str) -> str:
        language = pycountry.languages.get(alpha_2=code)
        if language is None:
            raise KeyError(code)
        return language.name


default_registry = PycountryLanguageRegistry()


@dataclass(frozen=True, slots=True)
class LanguageSelection:
    """The validated, normalized languages and their display names."""

    codes: tuple[str, ...] = ()
    names: dict[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        return ",".join(self.codes)

    @property
    def display_names(self) -> list[str]:
        """Display names in the same order as ``codes``."""
        return [self.names[code] for code in self.codes]


def split_languages(value: str | None) -> list[str]:
    """Split *value* on commas, trimming and lower-casing each token.

    An empty or blank value yields no tokens.
    """
    if value is None or not value.strip():
        return []
    return [token.strip().lower() for token in value.split(",")]


def parse_languages(value: str | None, registry: LanguageRegistry | None = None) -> LanguageSelection:
    """Validate and normalize a comma-separated language string.

    Args:
        value: Raw user input, e.g. ``"en,De, ES"``.
        registry: ISO 639-1 lookup; defaults to the pycountry-backed registry.

    Returns:
        The normalized codes in input order, with their display names.

    Raises:
        LanguageFormatError: If any token is not two ASCII letters.
        DuplicateLanguageError: If any normalized code repeats.
        UnknownLanguageError: If any code is missing from the registry.
    """
    registry = registry or default_registry
    codes = split_languages(value)

    if any(_CODE_RE.fullmatch(code) is None for code in codes):
        raise LanguageFormatError
    if len(set(codes)) != len(codes):
        raise DuplicateLanguageError
    unknown = [code for code in codes if not registry.is_valid_code(code)]
    if unknown:
        raise UnknownLanguageError(params={"codes": unknown})

    return LanguageSelection(
        codes=tuple(codes),
        names={code: registry.display_name(code) for code in codes},
    )
