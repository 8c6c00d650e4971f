"""Open/closed evaluation of optional start/end ranges.

Voting periods and calls for papers are both described by a start and an
end that may be plain dates or aware datetimes.  Whenever one side of a
comparison is a plain date the comparison happens by calendar day (in the
current Django timezone); two datetimes are compared as instants.
"""

import datetime
from dataclasses import dataclass

from django.utils import timezone

Moment = datetime.date | datetime.datetime


def _is_date_only(value: Moment) -> bool:
    return not isinstance(value, datetime.datetime)


def _to_day(value: Moment) -> datetime.date:
    if _is_date_only(value):
        return value
    if timezone.is_aware(value):
        return timezone.localtime(value).date()
    return value.date()


def _to_instant(value: datetime.datetime) -> datetime.datetime:
    if timezone.is_naive(value):
        return timezone.make_aware(value)
    return value


def day_bound(value: Moment, tzinfo: datetime.tzinfo, *, end: bool) -> datetime.datetime:
    """Turn a date or datetime bound into an aware datetime in *tzinfo*.

    Plain dates cover the whole day: a start begins at midnight, an end
    lasts until the last second of the day.  Naive datetimes are read in
    *tzinfo*; aware ones are returned unchanged.
    """
    if isinstance(value, datetime.datetime):
        return value if timezone.is_aware(value) else value.replace(tzinfo=tzinfo)
    moment = datetime.time(23, 59, 59) if end else datetime.time.min
    return datetime.datetime.combine(value, moment, tzinfo=tzinfo)


def _normalize(bound: Moment, now: Moment) -> tuple[Moment, Moment]:
    """Bring *bound* and *now* to a common granularity."""
    if _is_date_only(bound) or _is_date_only(now):
        return _to_day(bound), _to_day(now)
    return _to_instant(bound), _to_instant(now)


@dataclass(frozen=True, slots=True)
class TemporalWindow:
    """A range whose bounds may each be missing.

    A window with neither bound is *unset*.  A missing bound is treated as
    unbounded on that side, and ``start == end`` is a valid window covering
    a single day or instant.
    """

    start: Moment | None = None
    end: Moment | None = None

    @property
    def is_set(self) -> bool:
        return self.start is not None or self.end is not None

    def has_not_started(self, now: Moment) -> bool:
        """Whether *now* is before the start of the window."""
        if self.start is None:
            return False
        start, current = _normalize(self.start, now)
        return current < start

    def is_over(self, now: Moment) -> bool:
        """Whether the window is set and *now* is after its end."""
        if self.end is None:
            return False
        end, current = _normalize(self.end, now)
        return current > end

    def is_open(self, now: Moment) -> bool:
        """Whether *now* falls inside the window.

        An unset window is always open.
        """
        return not self.has_not_started(now) and not self.is_over(now)

    def is_ordered(self) -> bool:
        """Whether the start is on or before the end (trivially true when a bound is missing)."""
        if self.start is None or self.end is None:
            return True
        return not self.is_over(self.start)
