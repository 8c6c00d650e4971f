"""Program lifecycle and configuration commands.

All writes that must keep a program's schedule consistent go through
:class:`ProgramService`.  Each command validates first, then applies every
change inside one transaction so no caller can observe a program whose
interval changed but whose slots and event type lengths did not.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from django.core.exceptions import ObjectDoesNotExist
from django.db import transaction

from django_conference_program.conference.models import Conference
from django_conference_program.programs.models import (
    Cfp,
    DifficultyLevel,
    Event,
    EventSchedule,
    EventType,
    EventUser,
    Program,
    Schedule,
    Track,
)
from django_conference_program.programs.reconciler import (
    LengthChange,
    fit_length,
    reconcile_event_type_lengths,
    reconcile_slots,
)
from django_conference_program.settings import get_config

logger = logging.getLogger(__name__)

DEFAULT_EVENT_TYPES: tuple[dict[str, Any], ...] = (
    {
        "title": "Talk",
        "length": 30,
        "color": "#FF0000",
        "description": "Presentation in lecture format",
        "minimum_abstract_length": 0,
        "maximum_abstract_length": 500,
    },
    {
        "title": "Workshop",
        "length": 60,
        "color": "#0000FF",
        "description": "Interactive hands-on practice",
        "minimum_abstract_length": 0,
        "maximum_abstract_length": 500,
    },
)

DEFAULT_DIFFICULTY_LEVELS: tuple[dict[str, str], ...] = (
    {
        "title": "Easy",
        "description": "Events are understandable for everyone without knowledge of the topic.",
        "color": "#70EF69",
    },
    {
        "title": "Medium",
        "description": "Events require a basic understanding of the topic.",
        "color": "#EEEF69",
    },
    {
        "title": "Hard",
        "description": "Events require expert knowledge of the topic.",
        "color": "#EF6E69",
    },
)


@dataclass(slots=True)
class ScheduleReconciliation:
    """What a save did to the schedule when the interval changed."""

    old_interval: int
    new_interval: int
    removed_event_schedules: list[EventSchedule] = field(default_factory=list)
    length_changes: list[LengthChange] = field(default_factory=list)

    @property
    def interval_changed(self) -> bool:
        return self.old_interval != self.new_interval


def get_program(conference: Conference) -> Program | None:
    """Return the conference's program, or ``None`` when it has none."""
    try:
        return conference.program
    except ObjectDoesNotExist:
        return None


class ProgramService:
    """Stateless service for creating, updating, and deleting programs."""

    @staticmethod
    @transaction.atomic
    def create_program(conference: Conference, **fields: Any) -> Program:
        """Create the program of *conference* and seed its default children.

        Unspecified settings come from ``DJANGO_CONFERENCE_PROGRAM['defaults']``.
        Two event types (Talk, Workshop) and three difficulty levels (Easy,
        Medium, Hard) are always created; event type lengths are fitted to
        the program's interval.

        Args:
            conference: The owning conference.  It must not have a program yet.
            **fields: Initial ``Program`` field values.

        Returns:
            The saved program.

        Raises:
            ValidationError: If the values are invalid or the conference
                already has a program.
        """
        defaults = get_config().defaults
        values: dict[str, Any] = {
            "schedule_interval": defaults.schedule_interval,
            "rating": defaults.rating,
            "blind_voting": defaults.blind_voting,
            "languages": defaults.languages,
        }
        values.update(fields)

        program = Program(conference=conference, **values)
        program.full_clean()
        program.save()

        event_types = EventType.objects.bulk_create(
            [
                EventType(
                    program=program,
                    **{**data, "length": fit_length(data["length"], program.schedule_interval)},
                )
                for data in DEFAULT_EVENT_TYPES
            ]
        )
        difficulty_levels = DifficultyLevel.objects.bulk_create(
            [DifficultyLevel(program=program, **data) for data in DEFAULT_DIFFICULTY_LEVELS]
        )

        logger.info(
            "Created program for conference '%s' with %d event types and %d difficulty levels",
            conference.slug,
            len(event_types),
            len(difficulty_levels),
        )
        return program

    @staticmethod
    @transaction.atomic
    def save_program(program: Program) -> ScheduleReconciliation:
        """Validate and save an existing program, reconciling its schedule.

        When ``schedule_interval`` differs from the stored value, time slots
        that no longer sit on the new slot grid are removed and event type
        lengths are refitted, in the same transaction as the save.  The
        affected events are not notified here.

        Args:
            program: A program that has been saved before.

        Returns:
            A summary of the reconciliation, empty when the interval is unchanged.

        Raises:
            ValidationError: If the program is invalid.  Nothing is written.
            ValueError: If the program has never been saved.
        """
        if program.pk is None:
            msg = "save_program() needs a saved program; use create_program() for new ones"
            raise ValueError(msg)

        program.full_clean()
        stored_interval: int = (
            Program.objects.select_for_update().values_list("schedule_interval", flat=True).get(pk=program.pk)
        )
        program.save()

        if stored_interval == program.schedule_interval:
            return ScheduleReconciliation(stored_interval, stored_interval)
        return ProgramService._reconcile_schedule(program, stored_interval)

    @staticmethod
    @transaction.atomic
    def update_schedule_interval(program: Program, new_interval: int) -> ScheduleReconciliation:
        """Change the slot interval of *program* and reconcile its schedule.

        Args:
            program: The program to update.
            new_interval: The new slot interval in minutes; must divide 60.

        Returns:
            The schedule reconciliation performed.

        Raises:
            ValidationError: If *new_interval* is not a valid interval.
        """
        program.schedule_interval = new_interval
        return ProgramService.save_program(program)

    @staticmethod
    def _reconcile_schedule(program: Program, old_interval: int) -> ScheduleReconciliation:
        """Drop misaligned time slots and refit event type lengths.

        Must run inside the transaction that changed the interval.
        """
        new_interval = program.schedule_interval

        entries = list(EventSchedule.objects.filter(event__program=program).select_related("event"))
        slots = reconcile_slots(old_interval, new_interval, program.schedule_start, entries)
        if slots.removed:
            EventSchedule.objects.filter(pk__in=[entry.pk for entry in slots.removed]).delete()

        changes = ProgramService._refit_lengths(program, old_interval)

        logger.info(
            "Schedule interval of '%s' changed from %d to %d: unscheduled %d of %d events, refitted %d event types",
            program.conference.slug,
            old_interval,
            new_interval,
            len(slots.removed),
            len(entries),
            len(changes),
        )
        return ScheduleReconciliation(
            old_interval=old_interval,
            new_interval=new_interval,
            removed_event_schedules=slots.removed,
            length_changes=changes,
        )

    @staticmethod
    @transaction.atomic
    def refit_event_types(program: Program) -> list[LengthChange]:
        """Refit event type lengths that are not a multiple of the current interval.

        Needed when event types were validated against the previous interval,
        e.g. admin inline rows posted together with an interval change.

        Returns:
            The length changes applied.
        """
        changes = ProgramService._refit_lengths(program, program.schedule_interval)
        if changes:
            logger.info(
                "Refitted %d event types of '%s' to a %d-minute interval",
                len(changes),
                program.conference.slug,
                program.schedule_interval,
            )
        return changes

    @staticmethod
    def _refit_lengths(program: Program, old_interval: int) -> list[LengthChange]:
        changes = reconcile_event_type_lengths(old_interval, program.schedule_interval, program.event_types.all())
        for change in changes:
            change.event_type.length = change.new_length
        EventType.objects.bulk_update([change.event_type for change in changes], ["length"])
        return changes

    @staticmethod
    @transaction.atomic
    def delete_program(program: Program) -> dict[str, int]:
        """Delete *program* together with everything it owns.

        Owned collections are removed explicitly, leaves first, and the
        conference is left without a program.

        Returns:
            The number of deleted rows per collection.
        """
        conference = program.conference
        program = Program.objects.select_for_update().get(pk=program.pk)
        Program.objects.filter(pk=program.pk).update(selected_schedule=None)

        owned = (
            ("event_schedules", EventSchedule.objects.filter(event__program=program)),
            ("event_schedules", EventSchedule.objects.filter(schedule__program=program)),
            ("event_users", EventUser.objects.filter(event__program=program)),
            ("events", Event.objects.filter(program=program)),
            ("schedules", Schedule.objects.filter(program=program)),
            ("cfps", Cfp.objects.filter(program=program)),
            ("tracks", Track.objects.filter(program=program)),
            ("difficulty_levels", DifficultyLevel.objects.filter(program=program)),
            ("event_types", EventType.objects.filter(program=program)),
        )
        counts: dict[str, int] = {}
        for name, queryset in owned:
            deleted, _ = queryset.delete()
            counts[name] = counts.get(name, 0) + deleted

        Program.objects.filter(pk=program.pk).delete()
        reverse = Program._meta.get_field("conference").remote_field
        if reverse.is_cached(conference):
            reverse.delete_cached_value(conference)

        logger.info(
            "Deleted program of conference '%s' (%s)",
            conference.slug,
            ", ".join(f"{name}={count}" for name, count in counts.items()),
        )
        return counts
