"""Tests for the programs admin."""

from datetime import UTC, date, datetime

import pytest
from django.contrib import admin
from django.test import RequestFactory
from django.urls import reverse

from django_conference_program.conference.models import Conference
from django_conference_program.programs.admin import ProgramAdmin
from django_conference_program.programs.models import Event, EventSchedule, Program, Schedule


@pytest.fixture
def program(db) -> Program:
    conference = Conference.objects.create(
        name="AdminCon",
        slug="admincon",
        start_date=date(2027, 7, 1),
        end_date=date(2027, 7, 3),
    )
    return conference.program


@pytest.fixture
def model_admin() -> ProgramAdmin:
    return ProgramAdmin(Program, admin.site)


@pytest.fixture
def sent_messages(model_admin: ProgramAdmin, monkeypatch: pytest.MonkeyPatch) -> list[str]:
    sent: list[str] = []
    monkeypatch.setattr(model_admin, "message_user", lambda request, message, level=None: sent.append(message))
    return sent


@pytest.mark.django_db
def test_programs_cannot_be_added_from_admin(model_admin: ProgramAdmin):
    assert model_admin.has_add_permission(RequestFactory().get("/")) is False


@pytest.mark.django_db
def test_save_model_reconciles_and_reports(program: Program, model_admin: ProgramAdmin, sent_messages: list[str]):
    schedule = Schedule.objects.create(program=program)
    event = Event.objects.create(program=program, title="Misaligned")
    EventSchedule.objects.create(event=event, schedule=schedule, start_time=datetime(2027, 7, 1, 9, 15, tzinfo=UTC))
    program.schedule_interval = 10

    model_admin.save_model(RequestFactory().post("/"), program, form=None, change=True)

    assert Program.objects.get(pk=program.pk).schedule_interval == 10
    assert not EventSchedule.objects.exists()
    assert len(sent_messages) == 1
    assert "changed from 15 to 10 minutes: 1 scheduled events were removed" in sent_messages[0]


@pytest.mark.django_db
def test_save_model_without_changes_is_silent(program: Program, model_admin: ProgramAdmin, sent_messages: list[str]):
    program.rating = 2

    model_admin.save_model(RequestFactory().post("/"), program, form=None, change=True)

    assert Program.objects.get(pk=program.pk).rating == 2
    assert sent_messages == []


@pytest.mark.django_db
def test_delete_model_removes_owned_records(program: Program, model_admin: ProgramAdmin):
    conference_pk = program.conference_id

    model_admin.delete_model(RequestFactory().post("/"), program)

    assert not Program.objects.exists()
    assert Conference.objects.filter(pk=conference_pk).exists()


@pytest.mark.django_db
def test_program_change_page_renders(program: Program, admin_client):
    response = admin_client.get(reverse("admin:program_programs_program_change", args=[program.pk]))
    assert response.status_code == 200
    assert b"Talk" in response.content


@pytest.mark.django_db
def test_program_changelist_renders(program: Program, admin_client):
    response = admin_client.get(reverse("admin:program_programs_program_changelist"))
    assert response.status_code == 200
    assert b"AdminCon" in response.content


def _management_form(prefix: str, total: int, initial: int) -> dict[str, object]:
    return {
        f"{prefix}-TOTAL_FORMS": total,
        f"{prefix}-INITIAL_FORMS": initial,
        f"{prefix}-MIN_NUM_FORMS": 0,
        f"{prefix}-MAX_NUM_FORMS": 1000,
    }


def _change_form_data(program: Program, **overrides: object) -> dict[str, object]:
    """Build the POST body of the program change form with its current values."""
    data: dict[str, object] = {
        "languages": program.languages,
        "rating": program.rating,
        "schedule_interval": program.schedule_interval,
        "selected_schedule": "",
        "voting_start_date_0": "",
        "voting_start_date_1": "",
        "voting_end_date_0": "",
        "voting_end_date_1": "",
    }
    event_types = list(program.event_types.all())
    data.update(_management_form("event_types", len(event_types), len(event_types)))
    for idx, event_type in enumerate(event_types):
        data.update(
            {
                f"event_types-{idx}-id": event_type.pk,
                f"event_types-{idx}-program": program.pk,
                f"event_types-{idx}-title": event_type.title,
                f"event_types-{idx}-length": event_type.length,
                f"event_types-{idx}-color": event_type.color,
                f"event_types-{idx}-minimum_abstract_length": event_type.minimum_abstract_length,
                f"event_types-{idx}-maximum_abstract_length": event_type.maximum_abstract_length,
            }
        )
    levels = list(program.difficulty_levels.all())
    data.update(_management_form("difficulty_levels", len(levels), len(levels)))
    for idx, level in enumerate(levels):
        data.update(
            {
                f"difficulty_levels-{idx}-id": level.pk,
                f"difficulty_levels-{idx}-program": program.pk,
                f"difficulty_levels-{idx}-title": level.title,
                f"difficulty_levels-{idx}-description": level.description,
                f"difficulty_levels-{idx}-color": level.color,
            }
        )
    data.update(_management_form("tracks", 0, 0))
    data.update(_management_form("cfps", 0, 0))
    data.update(overrides)
    return data


def _change_url(program: Program) -> str:
    return reverse("admin:program_programs_program_change", args=[program.pk])


@pytest.mark.django_db
def test_change_form_interval_change_refits_event_types(program: Program, admin_client):
    schedule = Schedule.objects.create(program=program)
    event = Event.objects.create(program=program, title="Misaligned")
    EventSchedule.objects.create(event=event, schedule=schedule, start_time=datetime(2027, 7, 1, 9, 15, tzinfo=UTC))

    response = admin_client.post(_change_url(program), _change_form_data(program, schedule_interval=20))

    assert response.status_code == 302
    assert Program.objects.get(pk=program.pk).schedule_interval == 20
    assert dict(program.event_types.values_list("title", "length")) == {"Talk": 20, "Workshop": 60}
    assert not EventSchedule.objects.exists()


@pytest.mark.django_db
def test_change_form_edited_event_type_keeps_refitted_length(program: Program, admin_client):
    talk = program.event_types.get(title="Talk")
    data = _change_form_data(program, schedule_interval=20)
    assert data["event_types-0-title"] == "Talk"
    data["event_types-0-color"] = "#00FF00"

    response = admin_client.post(_change_url(program), data)

    assert response.status_code == 302
    talk.refresh_from_db()
    assert talk.color == "#00FF00"
    assert talk.length == 20


@pytest.mark.django_db
def test_change_form_rejects_length_off_the_saved_interval(program: Program, admin_client):
    data = _change_form_data(program)
    assert data["event_types-0-title"] == "Talk"
    data["event_types-0-length"] = 25

    response = admin_client.post(_change_url(program), data)

    assert response.status_code == 200
    assert program.event_types.get(title="Talk").length == 30
