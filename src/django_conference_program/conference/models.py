"""Conference model for django-conference-program."""

import datetime
from zoneinfo import ZoneInfo

from django.core.validators import MaxValueValidator
from django.db import models


class Conference(models.Model):
    """A conference with dates, timezone, and daily schedule hours.

    Each conference owns exactly one program.  The ``start_date`` combined
    with ``start_hour`` in the conference ``timezone`` is the basis to which
    every scheduled time slot is aligned.
    """

    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=200, unique=True)
    start_date = models.DateField()
    end_date = models.DateField()
    start_hour = models.PositiveSmallIntegerField(
        default=9,
        validators=[MaxValueValidator(23)],
        help_text="Hour of day at which the daily schedule begins.",
    )
    end_hour = models.PositiveSmallIntegerField(
        default=20,
        validators=[MaxValueValidator(24)],
        help_text="Hour of day at which the daily schedule ends.",
    )
    timezone = models.CharField(max_length=100, default="UTC")
    venue = models.CharField(max_length=300, blank=True, default="")
    website_url = models.URLField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-start_date"]

    def __str__(self) -> str:
        return self.name

    @property
    def schedule_start(self) -> datetime.datetime:
        """Return the aware datetime at which the first schedule day begins."""
        return datetime.datetime.combine(
            self.start_date,
            datetime.time(hour=self.start_hour),
            tzinfo=ZoneInfo(self.timezone),
        )
