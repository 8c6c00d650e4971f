"""TOML loader for conference program bootstrap configuration.

Loads and validates a conference TOML file so that a conference, its
program settings, tracks, and calls for papers can be created
programmatically.

Example::

    [conference]
    name = "PyCon Test"
    start = 2027-05-01
    end = 2027-05-03
    timezone = "Europe/Berlin"
    start_hour = 9

    [conference.program]
    schedule_interval = 10
    languages = "en,de"

    [[conference.tracks]]
    name = "Web"

    [[conference.cfps]]
    type = "events"
    start = 2027-01-01
    end = 2027-03-01
"""

import re
import tomllib
from pathlib import Path
from typing import Any

from django_conference_program.programs.cfp_types import CFP_TYPES

_REQUIRED_CONFERENCE_FIELDS: set[str] = {"name", "start", "end", "timezone"}
_REQUIRED_TRACK_FIELDS: set[str] = {"name"}
_REQUIRED_CFP_FIELDS: set[str] = {"type", "start", "end"}
_PROGRAM_FIELDS: set[str] = {
    "schedule_interval",
    "rating",
    "blind_voting",
    "voting_start",
    "voting_end",
    "languages",
    "schedule_public",
    "schedule_fluid",
}

_SLUG_RE = re.compile(r"[^\w\s-]")
_WHITESPACE_RE = re.compile(r"[-\s]+")


def _slugify(value: str) -> str:
    """Convert a string to a URL-friendly slug.

    Args:
        value: The string to slugify.

    Returns:
        Lowercase, hyphen-separated slug.
    """
    value = _SLUG_RE.sub("", value.lower())
    return _WHITESPACE_RE.sub("-", value).strip("-")


def _ensure_slugs(items: list[dict[str, Any]], label: str) -> None:
    """Add a ``slug`` key derived from ``name`` to each item that lacks one."""
    for idx, item in enumerate(items):
        if "slug" not in item:
            if "name" not in item:
                msg = f"{label}[{idx}] is missing required field: name"
                raise ValueError(msg)
            item["slug"] = _slugify(item["name"])


def _validate_unique(items: list[dict[str, Any]], key: str, label: str) -> None:
    """Ensure each item has a unique, non-empty string under *key*."""
    seen: set[str] = set()
    duplicates: set[str] = set()

    for idx, item in enumerate(items):
        value = item.get(key)
        if not isinstance(value, str) or not value:
            msg = f"{label}[{idx}].{key} must be a non-empty string"
            raise ValueError(msg)
        if value in seen:
            duplicates.add(value)
        seen.add(value)

    if duplicates:
        msg = f"{label} has duplicate {key}s: {', '.join(sorted(duplicates))}"
        raise ValueError(msg)


def _validate_list(conf: dict[str, Any], key: str, required_fields: set[str]) -> list[dict[str, Any]]:
    """Validate an optional list of mappings within the conference config.

    Args:
        conf: The conference config dict.
        key: The key to validate (e.g. ``"tracks"``, ``"cfps"``).
        required_fields: Fields every item must have.

    Returns:
        The items, or an empty list when the key is absent.
    """
    label = f"conference.{key}"
    items = conf.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        msg = f"{label} must be a list"
        raise ValueError(msg)
    for idx, item in enumerate(items):
        _validate_mapping(item, required_fields, f"{label}[{idx}]")
    return items


def _validate_program(conf: dict[str, Any]) -> None:
    program = conf.get("program")
    if program is None:
        conf["program"] = {}
        return
    _validate_mapping(program, set(), "conference.program")
    unknown = program.keys() - _PROGRAM_FIELDS
    if unknown:
        msg = f"conference.program has unknown fields: {', '.join(sorted(unknown))}"
        raise ValueError(msg)


def _validate_cfps(cfps: list[dict[str, Any]]) -> None:
    for idx, cfp in enumerate(cfps):
        if cfp["type"] not in CFP_TYPES:
            msg = f"conference.cfps[{idx}].type must be one of: {', '.join(CFP_TYPES)}"
            raise ValueError(msg)
    _validate_unique(cfps, "type", "conference.cfps")


def load_conference_config(path: str | Path) -> dict[str, Any]:
    """Load and validate a conference TOML configuration file.

    Args:
        path: Filesystem path to the TOML file.

    Returns:
        The ``conference`` mapping from the parsed TOML, with native types
        (``datetime.date`` for dates).  ``program`` is always present
        (possibly empty); ``tracks`` and ``cfps`` are always lists.  Slugs
        are auto-generated from ``name`` when not explicitly provided.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If required keys or fields are missing, or the file is
            not valid TOML.
    """
    path = Path(path)
    if not path.exists():
        msg = f"Conference config file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open("rb") as fh:
        try:
            data: dict[str, Any] = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {path}: {exc}"
            raise ValueError(msg) from exc

    if "conference" not in data:
        msg = "Missing required [conference] table in config file"
        raise ValueError(msg)

    conf = data["conference"]

    _validate_mapping(conf, _REQUIRED_CONFERENCE_FIELDS, "conference")
    if "slug" not in conf:
        conf["slug"] = _slugify(conf["name"])

    _validate_program(conf)

    tracks = _validate_list(conf, "tracks", _REQUIRED_TRACK_FIELDS)
    _ensure_slugs(tracks, "conference.tracks")
    _validate_unique(tracks, "slug", "conference.tracks")
    conf["tracks"] = tracks

    cfps = _validate_list(conf, "cfps", _REQUIRED_CFP_FIELDS)
    _validate_cfps(cfps)
    conf["cfps"] = cfps

    return conf


def _validate_mapping(mapping: object, required: set[str], label: str) -> None:
    """Validate that *mapping* is a dict containing all *required* keys.

    Args:
        mapping: The value to validate.
        required: Set of required key names.
        label: Human-readable context for error messages.

    Raises:
        TypeError: If *mapping* is not a dict.
        ValueError: If *mapping* is missing required keys.
    """
    if not isinstance(mapping, dict):
        msg = f"{label} must be a mapping, got {type(mapping).__name__}"
        raise TypeError(msg)
    missing = required - mapping.keys()
    if missing:
        msg = f"{label} is missing required fields: {', '.join(sorted(missing))}"
        raise ValueError(msg)
