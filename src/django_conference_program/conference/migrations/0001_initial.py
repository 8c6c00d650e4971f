import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Conference",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("slug", models.SlugField(max_length=200, unique=True)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                (
                    "start_hour",
                    models.PositiveSmallIntegerField(
                        default=9,
                        help_text="Hour of day at which the daily schedule begins.",
                        validators=[django.core.validators.MaxValueValidator(23)],
                    ),
                ),
                (
                    "end_hour",
                    models.PositiveSmallIntegerField(
                        default=20,
                        help_text="Hour of day at which the daily schedule ends.",
                        validators=[django.core.validators.MaxValueValidator(24)],
                    ),
                ),
                ("timezone", models.CharField(default="UTC", max_length=100)),
                ("venue", models.CharField(blank=True, default="", max_length=300)),
                ("website_url", models.URLField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-start_date"],
            },
        ),
    ]
