"""Django admin configuration for the conference app."""

from django.contrib import admin

from django_conference_program.conference.models import Conference


@admin.register(Conference)
class ConferenceAdmin(admin.ModelAdmin):
    """Admin interface for managing conferences.

    Groups fields into basic information and the schedule frame.  The
    program of a new conference is created by the ``post_save`` signal.
    """

    list_display = ("name", "slug", "start_date", "end_date", "timezone")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}
    readonly_fields = ("created_at", "updated_at")

    fieldsets = (
        (
            None,
            {
                "fields": ("name", "slug", "venue", "website_url"),
            },
        ),
        (
            "Schedule",
            {
                "fields": ("start_date", "end_date", "start_hour", "end_hour", "timezone"),
            },
        ),
        (
            "Status",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )
