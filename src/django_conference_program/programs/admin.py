"""Django admin configuration for the programs app."""

from django.contrib import admin, messages
from django.db.models import QuerySet
from django.forms import ModelForm
from django.http import HttpRequest

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
from django_conference_program.programs.services import ProgramService


class EventTypeInline(admin.TabularInline):
    """Inline editor for event types within the program admin."""

    model = EventType
    extra = 0
    fields = ("title", "length", "color", "minimum_abstract_length", "maximum_abstract_length")


class DifficultyLevelInline(admin.TabularInline):
    model = DifficultyLevel
    extra = 0
    fields = ("title", "description", "color")


class TrackInline(admin.TabularInline):
    model = Track
    extra = 0
    prepopulated_fields = {"short_name": ("name",)}
    fields = ("name", "short_name", "color")


class CfpInline(admin.TabularInline):
    """Inline editor for the program's calls for papers, one per type."""

    model = Cfp
    extra = 0
    max_num = len(Cfp.TYPES)
    fields = ("cfp_type", "start_date", "end_date", "description")


@admin.register(Program)
class ProgramAdmin(admin.ModelAdmin):
    """Admin interface for conference programs.

    Programs are created together with their conference, so adding one here
    is disabled.  Saving goes through :class:`ProgramService` so that an
    interval change unschedules misaligned events and refits event type
    lengths in the same transaction; the admin is told what was changed.
    """

    list_display = ("conference", "schedule_interval", "rating", "blind_voting", "schedule_public")
    list_filter = ("blind_voting", "schedule_public", "schedule_fluid")
    search_fields = ("conference__name", "conference__slug")
    readonly_fields = ("conference", "created_at", "updated_at")
    inlines = (EventTypeInline, DifficultyLevelInline, TrackInline, CfpInline)

    fieldsets = (
        (
            None,
            {
                "fields": ("conference", "languages", "rating"),
            },
        ),
        (
            "Schedule",
            {
                "fields": ("schedule_interval", "selected_schedule", "schedule_public", "schedule_fluid"),
            },
        ),
        (
            "Voting",
            {
                "fields": ("blind_voting", "voting_start_date", "voting_end_date"),
            },
        ),
    )

    def has_add_permission(self, request: HttpRequest) -> bool:  # noqa: ARG002, D102
        return False

    def formfield_for_foreignkey(self, db_field, request: HttpRequest, **kwargs):
        """Limit the selectable schedules to those of the edited program."""
        if db_field.name == "selected_schedule":
            program_id = request.resolver_match.kwargs.get("object_id") if request.resolver_match else None
            kwargs["queryset"] = Schedule.objects.filter(program_id=program_id)
        return super().formfield_for_foreignkey(db_field, request, **kwargs)

    def save_model(self, request: HttpRequest, obj: Program, form: ModelForm, change: bool) -> None:  # noqa: ARG002, FBT001
        """Save through the program service and report any schedule reconciliation."""
        result = ProgramService.save_program(obj)
        if result.interval_changed and (result.removed_event_schedules or result.length_changes):
            self.message_user(
                request,
                f"Schedule interval changed from {result.old_interval} to {result.new_interval} minutes: "
                f"{len(result.removed_event_schedules)} scheduled events were removed and "
                f"{len(result.length_changes)} event types were refitted.",
                messages.WARNING,
            )

    def save_related(self, request: HttpRequest, form: ModelForm, formsets: list, change: bool) -> None:  # noqa: FBT001
        """Save the inlines, then refit event type rows posted with the previous interval's lengths."""
        super().save_related(request, form, formsets, change)
        ProgramService.refit_event_types(form.instance)

    def delete_model(self, request: HttpRequest, obj: Program) -> None:  # noqa: ARG002, D102
        ProgramService.delete_program(obj)

    def delete_queryset(self, request: HttpRequest, queryset: QuerySet[Program]) -> None:  # noqa: ARG002, D102
        for program in queryset:
            ProgramService.delete_program(program)


class EventUserInline(admin.TabularInline):
    """Inline editor for the users attached to an event."""

    model = EventUser
    extra = 0
    fields = ("user", "event_role")
    raw_id_fields = ("user",)


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    """Admin interface for proposals and accepted events."""

    list_display = ("title", "program", "state", "event_type", "track", "language")
    list_filter = ("program", "state", "event_type")
    search_fields = ("title", "abstract")
    readonly_fields = ("created_at", "updated_at")
    inlines = (EventUserInline,)


class EventScheduleInline(admin.TabularInline):
    """Inline editor for the time slots of a schedule."""

    model = EventSchedule
    extra = 0
    fields = ("event", "start_time")


@admin.register(Schedule)
class ScheduleAdmin(admin.ModelAdmin):
    """Admin interface for schedules and their time slots."""

    list_display = ("__str__", "program", "created_at")
    list_filter = ("program",)
    readonly_fields = ("created_at",)
    inlines = (EventScheduleInline,)
