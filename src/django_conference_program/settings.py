"""Typed configuration for django-conference-program.

Reads a single ``DJANGO_CONFERENCE_PROGRAM`` dict from Django settings and
exposes it as composed, frozen dataclasses with sensible defaults.

Usage::

    from django_conference_program.settings import get_config

    config = get_config()
    config.defaults.schedule_interval
    config.auto_create_program
"""

import functools
from collections.abc import Mapping
from dataclasses import dataclass, field

from django.conf import settings
from django.test.signals import setting_changed


@dataclass(frozen=True, slots=True)
class DefaultsConfig:
    """Initial values given to newly created programs."""

    schedule_interval: int = 15
    rating: int = 0
    blind_voting: bool = False
    languages: str = ""


@dataclass(frozen=True, slots=True)
class ProgramConfig:
    """Top-level django-conference-program configuration."""

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    auto_create_program: bool = True


@functools.lru_cache(maxsize=1)
def get_config() -> ProgramConfig:
    """Build and return the program configuration.

    Reads ``settings.DJANGO_CONFERENCE_PROGRAM`` (a plain dict) and returns a
    frozen :class:`ProgramConfig`.  The result is cached; the cache is cleared
    automatically when Django's ``setting_changed`` signal fires (e.g. inside
    ``override_settings``).
    """
    raw = getattr(settings, "DJANGO_CONFERENCE_PROGRAM", {})
    if not isinstance(raw, Mapping):
        msg = "DJANGO_CONFERENCE_PROGRAM must be a mapping (dict-like object)"
        raise TypeError(msg)
    raw_data = dict(raw)

    defaults_data = raw_data.pop("defaults", {})
    if not isinstance(defaults_data, Mapping):
        msg = "DJANGO_CONFERENCE_PROGRAM['defaults'] must be a mapping (dict-like object)"
        raise TypeError(msg)

    config = ProgramConfig(
        defaults=DefaultsConfig(**dict(defaults_data)),
        **raw_data,
    )
    _validate_program_config(config)
    return config


def _validate_program_config(config: ProgramConfig) -> None:
    """Validate high-impact configuration values with clear error messages."""
    interval = config.defaults.schedule_interval
    if not isinstance(interval, int) or not 5 <= interval <= 60 or 60 % interval:
        msg = "DJANGO_CONFERENCE_PROGRAM['defaults']['schedule_interval'] must be a divisor of 60 between 5 and 60"
        raise ValueError(msg)
    rating = config.defaults.rating
    if not isinstance(rating, int) or not 0 <= rating <= 10:
        msg = "DJANGO_CONFERENCE_PROGRAM['defaults']['rating'] must be an integer between 0 and 10"
        raise ValueError(msg)
    if not isinstance(config.defaults.blind_voting, bool):
        msg = "DJANGO_CONFERENCE_PROGRAM['defaults']['blind_voting'] must be a boolean"
        raise TypeError(msg)
    if not isinstance(config.defaults.languages, str):
        msg = "DJANGO_CONFERENCE_PROGRAM['defaults']['languages'] must be a string"
        raise TypeError(msg)
    if not isinstance(config.auto_create_program, bool):
        msg = "DJANGO_CONFERENCE_PROGRAM['auto_create_program'] must be a boolean"
        raise TypeError(msg)


def _clear_config_cache(*, setting: str, **kwargs: object) -> None:  # noqa: ARG001
    """Clear the cached config when Django settings change during tests."""
    if setting == "DJANGO_CONFERENCE_PROGRAM":
        get_config.cache_clear()


setting_changed.connect(_clear_config_cache, dispatch_uid="django_conference_program.settings.clear_config_cache")
