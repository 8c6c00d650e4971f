"""Management command to bootstrap a conference program from a TOML configuration file."""

import logging
from typing import Any
from zoneinfo import ZoneInfo

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError, CommandParser
from django.db import transaction

from django_conference_program.conference.models import Conference
from django_conference_program.config_loader import load_conference_config
from django_conference_program.programs.models import Cfp, Program, Track
from django_conference_program.programs.services import ProgramService, ScheduleReconciliation, get_program
from django_conference_program.programs.windows import day_bound

logger = logging.getLogger(__name__)

# Mapping from TOML short field names to Django model field names.
_CONFERENCE_FIELD_MAP: dict[str, str] = {
    "name": "name",
    "slug": "slug",
    "start": "start_date",
    "end": "end_date",
    "start_hour": "start_hour",
    "end_hour": "end_hour",
    "timezone": "timezone",
    "venue": "venue",
    "website_url": "website_url",
}

_PROGRAM_FIELD_MAP: dict[str, str] = {
    "schedule_interval": "schedule_interval",
    "rating": "rating",
    "blind_voting": "blind_voting",
    "languages": "languages",
    "schedule_public": "schedule_public",
    "schedule_fluid": "schedule_fluid",
}

_TRACK_FIELD_MAP: dict[str, str] = {
    "name": "name",
    "description": "description",
    "color": "color",
}

_CFP_FIELD_MAP: dict[str, str] = {
    "start": "start_date",
    "end": "end_date",
    "description": "description",
}


def _map_fields(data: dict[str, Any], field_map: dict[str, str]) -> dict[str, Any]:
    """Map TOML config keys to Django model field names.

    Args:
        data: Raw config data with short field names.
        field_map: Mapping of config key -> model field name.

    Returns:
        Dict with model field names as keys.
    """
    result: dict[str, Any] = {}
    for config_key, model_field in field_map.items():
        if config_key in data:
            result[model_field] = data[config_key]
    return result


class Command(BaseCommand):
    """Bootstrap a conference and its program from a TOML configuration file.

    Parses the given TOML file, validates its structure, and creates (or
    updates) the ``Conference``, its ``Program`` settings, ``Track`` and
    ``Cfp`` records.  Program changes go through ``ProgramService`` so an
    interval change reconciles the existing schedule.

    Usage::

        manage.py bootstrap_conference --config conference.toml
        manage.py bootstrap_conference --config conference.toml --update
        manage.py bootstrap_conference --config conference.toml --dry-run
    """

    help = "Create or update a conference program, tracks, and CFPs from a TOML config file."

    def add_arguments(self, parser: CommandParser) -> None:
        """Define the command-line arguments accepted by this command.

        Args:
            parser: The argument parser to configure.
        """
        parser.add_argument(
            "--config",
            required=True,
            help="Path to the conference TOML configuration file.",
        )
        parser.add_argument(
            "--update",
            action="store_true",
            default=False,
            help="Update an existing conference instead of failing on duplicate slug.",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            default=False,
            help="Validate the config and print what would be created without saving.",
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the bootstrap command.

        Args:
            *args: Positional arguments (unused).
            **options: Parsed command-line options.
        """
        config_path: str = options["config"]
        update: bool = options["update"]
        dry_run: bool = options["dry_run"]

        try:
            conf = load_conference_config(config_path)
        except (FileNotFoundError, TypeError, ValueError) as exc:
            raise CommandError(str(exc)) from exc

        if dry_run:
            self._print_dry_run(conf)
            return

        try:
            with transaction.atomic():
                conference = self._bootstrap_conference(conf, update=update)
                program, reconciliation = self._bootstrap_program(conference, conf)
                tracks = self._bootstrap_tracks(program, conf["tracks"])
                cfps = self._bootstrap_cfps(program, conf["cfps"])
        except ValidationError as exc:
            raise CommandError(f"Invalid configuration: {exc}") from exc

        self.stdout.write(self.style.SUCCESS(f"Conference '{conference.slug}' is ready."))
        self.stdout.write(f"  Schedule interval: {program.schedule_interval} minutes")
        if reconciliation.interval_changed:
            self.stdout.write(
                f"  Interval changed from {reconciliation.old_interval}: "
                f"{len(reconciliation.removed_event_schedules)} scheduled events removed, "
                f"{len(reconciliation.length_changes)} event types refitted"
            )
        self.stdout.write(f"  Tracks: {tracks}")
        self.stdout.write(f"  CFPs: {cfps}")

    def _bootstrap_conference(self, conf: dict[str, Any], *, update: bool) -> Conference:
        fields = _map_fields(conf, _CONFERENCE_FIELD_MAP)
        slug = fields.pop("slug")

        existing = Conference.objects.filter(slug=slug).first()
        if existing is not None and not update:
            msg = f"Conference with slug '{slug}' already exists. Use --update to modify it."
            raise CommandError(msg)

        if existing is None:
            conference = Conference(slug=slug, **fields)
            conference.full_clean()
            conference.save()
            logger.info("Created conference '%s'", slug)
            return conference

        for name, value in fields.items():
            setattr(existing, name, value)
        existing.full_clean()
        existing.save()
        logger.info("Updated conference '%s'", slug)
        return existing

    def _bootstrap_program(
        self, conference: Conference, conf: dict[str, Any]
    ) -> tuple[Program, ScheduleReconciliation]:
        settings_data: dict[str, Any] = conf["program"]
        fields = _map_fields(settings_data, _PROGRAM_FIELD_MAP)
        tz = ZoneInfo(conference.timezone)
        if "voting_start" in settings_data:
            fields["voting_start_date"] = day_bound(settings_data["voting_start"], tz, end=False)
        if "voting_end" in settings_data:
            fields["voting_end_date"] = day_bound(settings_data["voting_end"], tz, end=True)

        program = get_program(conference)
        if program is None:
            program = ProgramService.create_program(conference, **fields)
            return program, ScheduleReconciliation(program.schedule_interval, program.schedule_interval)

        for name, value in fields.items():
            setattr(program, name, value)
        return program, ProgramService.save_program(program)

    def _bootstrap_tracks(self, program: Program, tracks_data: list[dict[str, Any]]) -> int:
        for data in tracks_data:
            track = Track.objects.filter(program=program, short_name=data["slug"]).first() or Track(
                program=program, short_name=data["slug"]
            )
            for name, value in _map_fields(data, _TRACK_FIELD_MAP).items():
                setattr(track, name, value)
            track.full_clean()
            track.save()
        return len(tracks_data)

    def _bootstrap_cfps(self, program: Program, cfps_data: list[dict[str, Any]]) -> int:
        for data in cfps_data:
            cfp = Cfp.objects.filter(program=program, cfp_type=data["type"]).first() or Cfp(
                program=program, cfp_type=data["type"]
            )
            for name, value in _map_fields(data, _CFP_FIELD_MAP).items():
                setattr(cfp, name, value)
            cfp.full_clean()
            cfp.save()
        return len(cfps_data)

    def _print_dry_run(self, conf: dict[str, Any]) -> None:
        self.stdout.write(self.style.NOTICE("Dry run: nothing will be saved."))
        self.stdout.write(f"Conference: {conf['name']} ({conf['slug']}) {conf['start']} - {conf['end']}")
        for key, value in sorted(conf["program"].items()):
            self.stdout.write(f"  program.{key} = {value}")
        for track in conf["tracks"]:
            self.stdout.write(f"  Track: {track['name']} ({track['slug']})")
        for cfp in conf["cfps"]:
            self.stdout.write(f"  CFP: {cfp['type']} {cfp['start']} - {cfp['end']}")
