"""Program, CFP, event type, and schedule models for django-conference-program."""

import datetime
from zoneinfo import ZoneInfo

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from django_conference_program.programs.cfp_types import CfpTypeRegistry
from django_conference_program.programs.languages import parse_languages, split_languages
from django_conference_program.programs.reconciler import is_aligned, is_valid_interval
from django_conference_program.programs.windows import Moment, TemporalWindow, day_bound


def validate_schedule_interval(value: int) -> None:
    """Reject intervals that do not split an hour into equal slots."""
    if not is_valid_interval(value):
        raise ValidationError("must be a divisor of 60", code="divisor_of_60")


class Program(models.Model):
    """The scheduling and review configuration of one conference.

    Owns the conference's calls for papers, schedules, event types, tracks,
    difficulty levels and events.  Write operations that must keep the
    schedule consistent go through
    :class:`~django_conference_program.programs.services.ProgramService`;
    the methods here are read-only queries.

    Time-dependent predicates take the current moment as ``now`` (a date or
    an aware datetime) and fall back to :func:`django.utils.timezone.now`.
    """

    conference = models.OneToOneField(
        "program_conference.Conference",
        on_delete=models.CASCADE,
        related_name="program",
    )
    rating = models.PositiveSmallIntegerField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(10)],
        help_text="Maximum rating reviewers can give. 0 disables rating.",
    )
    schedule_interval = models.PositiveSmallIntegerField(
        default=15,
        validators=[MinValueValidator(5), MaxValueValidator(60), validate_schedule_interval],
        help_text="Slot granularity of the schedule in minutes.",
    )
    schedule_public = models.BooleanField(default=False)
    schedule_fluid = models.BooleanField(
        default=False,
        help_text="Allow submitters to propose changes to the published schedule.",
    )
    blind_voting = models.BooleanField(
        default=False,
        help_text="Hide votes until the voting period is over.",
    )
    voting_start_date = models.DateTimeField(null=True, blank=True)
    voting_end_date = models.DateTimeField(null=True, blank=True)
    languages = models.CharField(
        max_length=200,
        blank=True,
        default="",
        help_text="Comma-separated ISO 639-1 codes, e.g. 'en,de'.",
    )
    selected_schedule = models.ForeignKey(
        "Schedule",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["conference"]

    def __str__(self) -> str:
        return f"Program for {self.conference}"

    def save(self, *args: object, **kwargs: object) -> None:
        """Store date-only voting bounds as whole days in the conference timezone."""
        self._widen_voting_dates()
        super().save(*args, **kwargs)

    def clean_fields(self, exclude: object = None) -> None:
        self._widen_voting_dates()
        super().clean_fields(exclude=exclude)

    def _widen_voting_dates(self) -> None:
        bounds = (("voting_start_date", False), ("voting_end_date", True))
        if not any(isinstance(getattr(self, name), datetime.date) for name, _ in bounds):
            return
        tz = ZoneInfo(self.conference.timezone) if self.conference_id else timezone.get_current_timezone()
        for name, end in bounds:
            value = getattr(self, name)
            if isinstance(value, datetime.date):
                setattr(self, name, day_bound(value, tz, end=end))

    def clean(self) -> None:
        """Validate the voting window, languages, and selected schedule.

        Normalizes ``languages`` in place on success.
        """
        errors: dict[str, list[ValidationError]] = {}

        start, end = self.voting_start_date, self.voting_end_date
        if start is not None and end is None:
            errors["voting_end_date"] = [ValidationError("must be set when the voting start date is set")]
        elif end is not None and start is None:
            errors["voting_start_date"] = [ValidationError("must be set when the voting end date is set")]
        elif not self.voting_window.is_ordered():
            errors["voting_end_date"] = [ValidationError("must be on or after the voting start date")]

        try:
            self.languages = str(parse_languages(self.languages))
        except ValidationError as exc:
            errors["languages"] = [exc]

        if (
            self.selected_schedule_id is not None
            and self.pk is not None
            and self.selected_schedule.program_id != self.pk
        ):
            errors["selected_schedule"] = [ValidationError("must belong to this program")]

        if errors:
            raise ValidationError(errors)

    # ---- configuration ----

    @property
    def schedule_start(self) -> datetime.datetime:
        """The alignment basis for time slots: conference start date at its start hour."""
        return self.conference.schedule_start

    @property
    def rating_enabled(self) -> bool:
        """Whether proposals can be rated."""
        return self.rating > 0

    @property
    def language_codes(self) -> list[str]:
        return split_languages(self.languages)

    @property
    def languages_list(self) -> list[str]:
        """Human-readable names of the program's languages, in configured order."""
        return parse_languages(self.languages).display_names

    # ---- voting ----

    @property
    def voting_window(self) -> TemporalWindow:
        return TemporalWindow(self.voting_start_date, self.voting_end_date)

    def is_voting_period(self, now: Moment | None = None) -> bool:
        """Whether votes can be cast; always true when no voting dates are set."""
        return self.voting_window.is_open(now or timezone.now())

    def show_voting(self, now: Moment | None = None) -> bool:
        """Whether vote results may be shown.

        With blind voting, results stay hidden until the voting period is over.
        A blind-voting program without voting dates never reveals them.
        """
        if not self.blind_voting:
            return True
        window = self.voting_window
        return window.is_set and window.is_over(now or timezone.now())

    # ---- calls for papers ----

    def cfp_registry(self) -> CfpTypeRegistry:
        return CfpTypeRegistry(self.cfps.all())

    @property
    def cfp(self) -> "Cfp | None":
        """The call for papers of type ``events``, if any."""
        return self.cfp_registry().primary_cfp()

    def remaining_cfp_types(self) -> list[str]:
        """CFP types that have no CFP yet, in canonical order."""
        return self.cfp_registry().remaining_types()

    def cfp_open(self, now: Moment | None = None) -> bool:
        """Whether any of the program's calls for papers is currently open."""
        now = now or timezone.now()
        return any(cfp.is_open(now) for cfp in self.cfps.all())

    # ---- schedule ----

    @property
    def event_schedules(self) -> models.QuerySet:
        """Every time-slot assignment of the program's events, across schedules."""
        return EventSchedule.objects.filter(event__program=self)

    @property
    def speakers(self) -> models.QuerySet:
        """Users holding the speaker role on any of the program's events."""
        return (
            get_user_model()
            .objects.filter(
                event_users__event__program=self,
                event_users__event_role=EventUser.Role.SPEAKER,
            )
            .distinct()
        )

    def selected_event_schedules(self) -> models.QuerySet:
        """Entries of the selected schedule ordered by start time (empty when none is selected)."""
        if self.selected_schedule_id is None:
            return EventSchedule.objects.none()
        return (
            EventSchedule.objects.filter(schedule_id=self.selected_schedule_id)
            .select_related("event", "event__event_type")
            .order_by("start_time")
        )

    def any_event_for_date(self, value: datetime.date | str | None) -> bool:
        """Whether the selected schedule places any event on the given day.

        The day is interpreted in the conference timezone.  Empty values and
        programs without a selected schedule always yield ``False``.
        """
        if not value or self.selected_schedule_id is None:
            return False
        if isinstance(value, str):
            value = datetime.date.fromisoformat(value)
        elif isinstance(value, datetime.datetime):
            value = timezone.localtime(value).date() if timezone.is_aware(value) else value.date()
        day_start = datetime.datetime.combine(value, datetime.time.min, tzinfo=ZoneInfo(self.conference.timezone))
        return EventSchedule.objects.filter(
            schedule_id=self.selected_schedule_id,
            start_time__gte=day_start,
            start_time__lt=day_start + datetime.timedelta(days=1),
        ).exists()


class EventType(models.Model):
    """A kind of event (talk, workshop, ...) with a fixed length in minutes.

    The length is kept a positive multiple of the program's schedule interval.
    """

    program = models.ForeignKey(Program, on_delete=models.CASCADE, related_name="event_types")
    title = models.CharField(max_length=200)
    length = models.PositiveIntegerField(default=30, help_text="Duration in minutes.")
    color = models.CharField(max_length=7, blank=True, default="")
    description = models.TextField(blank=True, default="")
    minimum_abstract_length = models.PositiveIntegerField(default=0)
    maximum_abstract_length = models.PositiveIntegerField(default=500)

    class Meta:
        ordering = ["title"]

    def __str__(self) -> str:
        return str(self.title)

    def clean(self) -> None:
        """Check the length against the interval the schedule is laid out in.

        That is the program's saved interval: an unsaved interval change is
        applied by ``ProgramService.save_program``, which refits the lengths.
        """
        if self.program_id is None:
            return
        interval = (
            Program.objects.filter(pk=self.program_id).values_list("schedule_interval", flat=True).first()
            or self.program.schedule_interval
        )
        if not self.length or self.length % interval:
            raise ValidationError({"length": f"must be a positive multiple of the schedule interval ({interval})"})
        if self.minimum_abstract_length > self.maximum_abstract_length:
            raise ValidationError({"maximum_abstract_length": "must not be less than the minimum abstract length"})


class DifficultyLevel(models.Model):
    """How much prior knowledge an event expects from its audience."""

    program = models.ForeignKey(Program, on_delete=models.CASCADE, related_name="difficulty_levels")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    color = models.CharField(max_length=7, blank=True, default="")

    class Meta:
        ordering = ["pk"]

    def __str__(self) -> str:
        return str(self.title)


class Track(models.Model):
    """A thematic grouping of events."""

    program = models.ForeignKey(Program, on_delete=models.CASCADE, related_name="tracks")
    name = models.CharField(max_length=200)
    short_name = models.SlugField(max_length=50)
    description = models.TextField(blank=True, default="")
    color = models.CharField(max_length=7, blank=True, default="")

    class Meta:
        ordering = ["name"]
        unique_together = [("program", "short_name")]

    def __str__(self) -> str:
        return str(self.name)


class Cfp(models.Model):
    """A call for papers: the submission window for one category of content."""

    class CfpType(models.TextChoices):
        """Categories that can be submitted to a program."""

        EVENTS = "events", "Events"
        BOOTHS = "booths", "Booths"
        TRACKS = "tracks", "Tracks"

    TYPES = CfpType.values

    program = models.ForeignKey(Program, on_delete=models.CASCADE, related_name="cfps")
    cfp_type = models.CharField(max_length=20, choices=CfpType.choices, default=CfpType.EVENTS)
    start_date = models.DateField()
    end_date = models.DateField()
    description = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["start_date"]
        unique_together = [("program", "cfp_type")]

    def __str__(self) -> str:
        return f"CFP for {self.get_cfp_type_display()} ({self.start_date} - {self.end_date})"

    def clean(self) -> None:
        if self.start_date and self.end_date and not self.window.is_ordered():
            raise ValidationError({"end_date": "must be on or after the start date"})

    @property
    def window(self) -> TemporalWindow:
        return TemporalWindow(self.start_date, self.end_date)

    def is_open(self, now: Moment | None = None) -> bool:
        """Whether submissions are accepted on the day of *now*."""
        return self.window.is_open(now or timezone.now())


class Event(models.Model):
    """A proposal or accepted event belonging to a program."""

    class State(models.TextChoices):
        """Review lifecycle of an event."""

        NEW = "new", "New"
        UNCONFIRMED = "unconfirmed", "Unconfirmed"
        CONFIRMED = "confirmed", "Confirmed"
        REJECTED = "rejected", "Rejected"
        WITHDRAWN = "withdrawn", "Withdrawn"
        CANCELED = "canceled", "Canceled"

    program = models.ForeignKey(Program, on_delete=models.CASCADE, related_name="events")
    title = models.CharField(max_length=500)
    abstract = models.TextField(blank=True, default="")
    state = models.CharField(max_length=20, choices=State.choices, default=State.NEW)
    language = models.CharField(max_length=2, blank=True, default="")
    event_type = models.ForeignKey(
        EventType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="events",
    )
    track = models.ForeignKey(
        Track,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="events",
    )
    difficulty_level = models.ForeignKey(
        DifficultyLevel,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="events",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["title"]

    def __str__(self) -> str:
        return str(self.title)


class EventUser(models.Model):
    """A user's role on an event (submitter, speaker, ...)."""

    class Role(models.TextChoices):
        SUBMITTER = "submitter", "Submitter"
        SPEAKER = "speaker", "Speaker"
        MODERATOR = "moderator", "Moderator"

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="event_users")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="event_users")
    event_role = models.CharField(max_length=20, choices=Role.choices, default=Role.SUBMITTER)

    class Meta:
        unique_together = [("event", "user", "event_role")]

    def __str__(self) -> str:
        return f"{self.user} ({self.event_role}) - {self.event}"


class Schedule(models.Model):
    """A named arrangement of events into time slots."""

    program = models.ForeignKey(Program, on_delete=models.CASCADE, related_name="schedules")
    name = models.CharField(max_length=200, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]

    def __str__(self) -> str:
        return self.name or f"Schedule {self.pk}"


class EventSchedule(models.Model):
    """The placement of one event at one start time within a schedule."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="event_schedules")
    schedule = models.ForeignKey(Schedule, on_delete=models.CASCADE, related_name="event_schedules")
    start_time = models.DateTimeField()

    class Meta:
        ordering = ["start_time"]
        unique_together = [("event", "schedule")]

    def __str__(self) -> str:
        return f"{self.event} at {self.start_time:%Y-%m-%d %H:%M}"

    def clean(self) -> None:
        if self.event_id is None or self.schedule_id is None:
            return
        program = self.event.program
        if self.schedule.program_id != program.pk:
            raise ValidationError({"schedule": "must belong to the event's program"})
        if self.start_time and not is_aligned(self.start_time, program.schedule_start, program.schedule_interval):
            raise ValidationError(
                {"start_time": f"must start on a {program.schedule_interval}-minute slot of the conference schedule"}
            )
