"""Reconciliation of schedule state with the program's slot interval.

When a program's ``schedule_interval`` changes, two pieces of derived state
must follow it:

* scheduled time slots (``EventSchedule.start_time``) must stay aligned to
  the interval, measured from the conference's daily schedule start;
* event type lengths must stay positive multiples of the interval.

The functions here are pure: they never touch the database.  The caller
persists the result, and must do so in the same transaction as the interval
change (see :class:`~django_conference_program.programs.services.ProgramService`).
"""

import datetime
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger(__name__)

VALID_INTERVALS: tuple[int, ...] = tuple(n for n in range(5, 61) if 60 % n == 0)


class ScheduleConsistencyError(RuntimeError):
    """Raised when reconciliation is asked to work with an impossible interval.

    Program validation rejects such intervals before they are saved, so this
    signals a programming error rather than bad user input.
    """


class SlotAssignment(Protocol):
    start_time: datetime.datetime


class SizedEventType(Protocol):
    length: int


@dataclass(slots=True)
class SlotReconciliation:
    """Outcome of :func:`reconcile_slots`, each list ordered by slot offset."""

    kept: list[Any] = field(default_factory=list)
    removed: list[Any] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class LengthChange:
    """A single event type whose length has to change."""

    event_type: Any
    old_length: int
    new_length: int


def is_valid_interval(interval: object) -> bool:
    """Whether *interval* is a whole number of minutes between 5 and 60 that divides 60."""
    return isinstance(interval, int) and not isinstance(interval, bool) and interval in VALID_INTERVALS


def _require_interval(name: str, interval: object) -> None:
    if not is_valid_interval(interval):
        msg = f"{name} {interval!r} is not a valid slot interval (expected one of {VALID_INTERVALS})"
        raise ScheduleConsistencyError(msg)


def slot_offset(start_time: datetime.datetime, schedule_start: datetime.datetime) -> datetime.timedelta:
    """Return how far *start_time* lies after the conference schedule start."""
    return start_time - schedule_start


def is_aligned(start_time: datetime.datetime, schedule_start: datetime.datetime, interval: int) -> bool:
    """Whether *start_time* sits on a slot boundary of *interval* minutes.

    Slots before the schedule start are never aligned.
    """
    offset = slot_offset(start_time, schedule_start)
    if offset < datetime.timedelta(0):
        return False
    return offset % datetime.timedelta(minutes=interval) == datetime.timedelta(0)


def fit_length(length: int, interval: int) -> int:
    """Return the length an event type should have under *interval*.

    Lengths of at least one interval are cut down to the closest multiple
    below them; anything shorter becomes exactly one interval.
    """
    if length >= interval:
        return length - length % interval
    return interval


def reconcile_slots(
    old_interval: int,
    new_interval: int,
    schedule_start: datetime.datetime,
    event_schedules: Iterable[SlotAssignment],
) -> SlotReconciliation:
    """Split *event_schedules* into those still aligned to *new_interval* and the rest.

    Args:
        old_interval: The interval the slots were placed under.
        new_interval: The interval being switched to.
        schedule_start: The aware datetime of the conference's first schedule
            slot (start date at its start hour).
        event_schedules: Objects exposing an aware ``start_time``.

    Returns:
        The kept and removed entries, each ordered by offset from
        *schedule_start* (ties keep their input order).

    Raises:
        ScheduleConsistencyError: If either interval is not a valid slot interval.
    """
    _require_interval("old_interval", old_interval)
    _require_interval("new_interval", new_interval)

    ordered = sorted(event_schedules, key=lambda entry: slot_offset(entry.start_time, schedule_start))
    result = SlotReconciliation()
    for entry in ordered:
        if is_aligned(entry.start_time, schedule_start, new_interval):
            result.kept.append(entry)
        else:
            logger.debug(
                "Slot at %s no longer fits a %d-minute interval (was %d)",
                entry.start_time.isoformat(),
                new_interval,
                old_interval,
            )
            result.removed.append(entry)
    return result


def reconcile_event_type_lengths(
    old_interval: int,
    new_interval: int,
    event_types: Iterable[SizedEventType],
) -> list[LengthChange]:
    """Compute the length changes needed for *event_types* under *new_interval*.

    Event types whose length is already a positive multiple of the new
    interval are left out of the result.

    Raises:
        ScheduleConsistencyError: If either interval is not a valid slot interval.
    """
    _require_interval("old_interval", old_interval)
    _require_interval("new_interval", new_interval)

    changes: list[LengthChange] = []
    for event_type in event_types:
        new_length = fit_length(event_type.length, new_interval)
        if new_length != event_type.length:
            changes.append(LengthChange(event_type, event_type.length, new_length))
    return changes
