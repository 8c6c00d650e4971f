"""Utility functions for the programs app."""

import datetime
from collections import Counter
from zoneinfo import ZoneInfo

from django_conference_program.programs.models import Program


def get_schedule_days(program: Program) -> list[tuple[str, str]]:
    """Extract the days of the selected schedule with event type labels.

    Walks the program's selected schedule and determines the predominant
    event type for each day.  A type is considered predominant when it
    accounts for more than half of the typed entries on that day.  Days are
    taken in the conference timezone.

    Args:
        program: The Program whose selected schedule is inspected.

    Returns:
        Sorted list of ``(iso_date_str, human_label)`` tuples.  Returns an
        empty list if no schedule is selected or it has no entries.
    """
    tz = ZoneInfo(program.conference.timezone)

    day_type_counts: dict[datetime.date, Counter[str]] = {}
    for entry in program.selected_event_schedules():
        entry_date = entry.start_time.astimezone(tz).date()
        counts = day_type_counts.setdefault(entry_date, Counter())
        if entry.event.event_type is not None:
            counts[entry.event.event_type.title] += 1

    result: list[tuple[str, str]] = []
    for day in sorted(day_type_counts):
        counts = day_type_counts[day]
        date_label = f"{day:%a, %b} {day.day}"

        if counts:
            total = sum(counts.values())
            most_common_type, most_common_count = counts.most_common(1)[0]
            label = f"{date_label} ({most_common_type})" if most_common_count > total / 2 else date_label
        else:
            label = date_label

        result.append((day.isoformat(), label))

    return result
