import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import django_conference_program.programs.models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("program_conference", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Program",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "rating",
                    models.PositiveSmallIntegerField(
                        default=0,
                        help_text="Maximum rating reviewers can give. 0 disables rating.",
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(10),
                        ],
                    ),
                ),
                (
                    "schedule_interval",
                    models.PositiveSmallIntegerField(
                        default=15,
                        help_text="Slot granularity of the schedule in minutes.",
                        validators=[
                            django.core.validators.MinValueValidator(5),
                            django.core.validators.MaxValueValidator(60),
                            django_conference_program.programs.models.validate_schedule_interval,
                        ],
                    ),
                ),
                ("schedule_public", models.BooleanField(default=False)),
                (
                    "schedule_fluid",
                    models.BooleanField(
                        default=False,
                        help_text="Allow submitters to propose changes to the published schedule.",
                    ),
                ),
                (
                    "blind_voting",
                    models.BooleanField(default=False, help_text="Hide votes until the voting period is over."),
                ),
                ("voting_start_date", models.DateTimeField(blank=True, null=True)),
                ("voting_end_date", models.DateTimeField(blank=True, null=True)),
                (
                    "languages",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Comma-separated ISO 639-1 codes, e.g. 'en,de'.",
                        max_length=200,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "conference",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="program",
                        to="program_conference.conference",
                    ),
                ),
            ],
            options={
                "ordering": ["conference"],
            },
        ),
        migrations.CreateModel(
            name="Schedule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(blank=True, default="", max_length=200)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="schedules",
                        to="program_programs.program",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
            },
        ),
        migrations.AddField(
            model_name="program",
            name="selected_schedule",
            field=models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to="program_programs.schedule",
            ),
        ),
        migrations.CreateModel(
            name="EventType",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("length", models.PositiveIntegerField(default=30, help_text="Duration in minutes.")),
                ("color", models.CharField(blank=True, default="", max_length=7)),
                ("description", models.TextField(blank=True, default="")),
                ("minimum_abstract_length", models.PositiveIntegerField(default=0)),
                ("maximum_abstract_length", models.PositiveIntegerField(default=500)),
                (
                    "program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_types",
                        to="program_programs.program",
                    ),
                ),
            ],
            options={
                "ordering": ["title"],
            },
        ),
        migrations.CreateModel(
            name="DifficultyLevel",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, default="")),
                ("color", models.CharField(blank=True, default="", max_length=7)),
                (
                    "program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="difficulty_levels",
                        to="program_programs.program",
                    ),
                ),
            ],
            options={
                "ordering": ["pk"],
            },
        ),
        migrations.CreateModel(
            name="Track",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("short_name", models.SlugField()),
                ("description", models.TextField(blank=True, default="")),
                ("color", models.CharField(blank=True, default="", max_length=7)),
                (
                    "program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tracks",
                        to="program_programs.program",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
                "unique_together": {("program", "short_name")},
            },
        ),
        migrations.CreateModel(
            name="Cfp",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "cfp_type",
                    models.CharField(
                        choices=[("events", "Events"), ("booths", "Booths"), ("tracks", "Tracks")],
                        default="events",
                        max_length=20,
                    ),
                ),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("description", models.TextField(blank=True, default="")),
                (
                    "program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="cfps",
                        to="program_programs.program",
                    ),
                ),
            ],
            options={
                "ordering": ["start_date"],
                "unique_together": {("program", "cfp_type")},
            },
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=500)),
                ("abstract", models.TextField(blank=True, default="")),
                (
                    "state",
                    models.CharField(
                        choices=[
                            ("new", "New"),
                            ("unconfirmed", "Unconfirmed"),
                            ("confirmed", "Confirmed"),
                            ("rejected", "Rejected"),
                            ("withdrawn", "Withdrawn"),
                            ("canceled", "Canceled"),
                        ],
                        default="new",
                        max_length=20,
                    ),
                ),
                ("language", models.CharField(blank=True, default="", max_length=2)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "difficulty_level",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="events",
                        to="program_programs.difficultylevel",
                    ),
                ),
                (
                    "event_type",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="events",
                        to="program_programs.eventtype",
                    ),
                ),
                (
                    "program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="events",
                        to="program_programs.program",
                    ),
                ),
                (
                    "track",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="events",
                        to="program_programs.track",
                    ),
                ),
            ],
            options={
                "ordering": ["title"],
            },
        ),
        migrations.CreateModel(
            name="EventSchedule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_time", models.DateTimeField()),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_schedules",
                        to="program_programs.event",
                    ),
                ),
                (
                    "schedule",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_schedules",
                        to="program_programs.schedule",
                    ),
                ),
            ],
            options={
                "ordering": ["start_time"],
                "unique_together": {("event", "schedule")},
            },
        ),
        migrations.CreateModel(
            name="EventUser",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "event_role",
                    models.CharField(
                        choices=[("submitter", "Submitter"), ("speaker", "Speaker"), ("moderator", "Moderator")],
                        default="submitter",
                        max_length=20,
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_users",
                        to="program_programs.event",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_users",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "unique_together": {("event", "user", "event_role")},
            },
        ),
    ]
