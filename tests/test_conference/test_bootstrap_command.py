import datetime
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from django_conference_program.conference.models import Conference
from django_conference_program.programs.models import Cfp, Event, EventSchedule, Program, Schedule, Track

CONFIG = """[conference]
name = "PyCon Test"
start = 2027-05-01
end = 2027-05-03
timezone = "Europe/Berlin"
start_hour = 9

[conference.program]
schedule_interval = {interval}
rating = 5
languages = "EN, de"
blind_voting = true
voting_start = 2027-03-01
voting_end = 2027-03-15

[[conference.tracks]]
name = "Web"

[[conference.tracks]]
name = "Data"

[[conference.cfps]]
type = "events"
start = 2027-01-01
end = 2027-03-01
"""


def _write_config(path, contents):
    path.write_text(contents)
    return str(path)


def _run(config_path, **options) -> str:
    out = StringIO()
    call_command("bootstrap_conference", config=config_path, stdout=out, **options)
    return out.getvalue()


@pytest.mark.django_db
def test_bootstrap_creates_conference_program_tracks_and_cfps(tmp_path):
    config_path = _write_config(tmp_path / "conference.toml", CONFIG.format(interval=15))

    output = _run(config_path)

    conference = Conference.objects.get(slug="pycon-test")
    assert conference.timezone == "Europe/Berlin"
    program = Program.objects.get(conference=conference)
    assert program.schedule_interval == 15
    assert program.rating == 5
    assert program.languages == "en,de"
    assert program.blind_voting is True
    assert program.event_types.count() == 2
    assert sorted(Track.objects.filter(program=program).values_list("short_name", flat=True)) == ["data", "web"]
    cfp = Cfp.objects.get(program=program)
    assert cfp.cfp_type == "events"
    assert cfp.end_date == datetime.date(2027, 3, 1)
    assert "Conference 'pycon-test' is ready." in output
    assert "Tracks: 2" in output
    assert "CFPs: 1" in output


@pytest.mark.django_db
def test_bootstrap_voting_dates_cover_whole_days(tmp_path):
    config_path = _write_config(tmp_path / "conference.toml", CONFIG.format(interval=15))

    _run(config_path)

    program = Program.objects.get(conference__slug="pycon-test")
    assert program.voting_start_date == datetime.datetime(2027, 3, 1, 0, 0, tzinfo=datetime.UTC) - datetime.timedelta(
        hours=1
    )
    assert program.is_voting_period(datetime.datetime(2027, 3, 15, 22, 30, tzinfo=datetime.UTC)) is True
    assert program.is_voting_period(datetime.datetime(2027, 3, 15, 23, 30, tzinfo=datetime.UTC)) is False


@pytest.mark.django_db
def test_bootstrap_rejects_duplicate_slug_without_update(tmp_path):
    config_path = _write_config(tmp_path / "conference.toml", CONFIG.format(interval=15))
    _run(config_path)

    with pytest.raises(CommandError, match="Use --update to modify it"):
        _run(config_path)


@pytest.mark.django_db
def test_bootstrap_update_reconciles_schedule(tmp_path):
    _run(_write_config(tmp_path / "initial.toml", CONFIG.format(interval=15)))
    program = Program.objects.get(conference__slug="pycon-test")
    schedule = Schedule.objects.create(program=program, name="Main")
    start = program.schedule_start
    for title, minutes in (("Aligned", 0), ("Misaligned", 15)):
        event = Event.objects.create(program=program, title=title)
        EventSchedule.objects.create(event=event, schedule=schedule, start_time=start + datetime.timedelta(minutes=minutes))

    output = _run(_write_config(tmp_path / "updated.toml", CONFIG.format(interval=10)), update=True)

    program.refresh_from_db()
    assert program.schedule_interval == 10
    assert list(EventSchedule.objects.values_list("event__title", flat=True)) == ["Aligned"]
    assert dict(program.event_types.values_list("title", "length")) == {"Talk": 30, "Workshop": 60}
    assert "Interval changed from 15: 1 scheduled events removed, 0 event types refitted" in output
    assert Track.objects.filter(program=program).count() == 2
    assert Cfp.objects.filter(program=program).count() == 1


@pytest.mark.django_db
def test_bootstrap_update_without_interval_change_reports_no_reconciliation(tmp_path):
    config_path = _write_config(tmp_path / "conference.toml", CONFIG.format(interval=15))
    _run(config_path)

    output = _run(config_path, update=True)

    assert "Interval changed" not in output
    assert Conference.objects.count() == 1


@pytest.mark.django_db
def test_bootstrap_dry_run_saves_nothing(tmp_path):
    config_path = _write_config(tmp_path / "conference.toml", CONFIG.format(interval=15))

    output = _run(config_path, dry_run=True)

    assert "Dry run: nothing will be saved." in output
    assert "Conference: PyCon Test (pycon-test) 2027-05-01 - 2027-05-03" in output
    assert "program.schedule_interval = 15" in output
    assert "Track: Web (web)" in output
    assert "CFP: events 2027-01-01 - 2027-03-01" in output
    assert not Conference.objects.exists()


@pytest.mark.django_db
def test_bootstrap_invalid_interval_is_rolled_back(tmp_path):
    config_path = _write_config(tmp_path / "conference.toml", CONFIG.format(interval=35))

    with pytest.raises(CommandError, match="Invalid configuration"):
        _run(config_path)

    assert not Conference.objects.exists()
    assert not Program.objects.exists()


@pytest.mark.django_db
def test_bootstrap_invalid_languages_are_reported(tmp_path):
    contents = CONFIG.format(interval=15).replace('"EN, de"', '"en,xx"')
    config_path = _write_config(tmp_path / "conference.toml", contents)

    with pytest.raises(CommandError, match="must be ISO 639-1 valid codes"):
        _run(config_path)


def test_bootstrap_wraps_loader_errors_as_command_error(tmp_path):
    config_path = _write_config(
        tmp_path / "bad.toml",
        """[conference]
name = "PyCon Test"
start = 2027-05-01
end = 2027-05-03
timezone = "UTC"

tracks = ["invalid"]
""",
    )

    with pytest.raises(CommandError, match=r"conference\.tracks\[0\] must be a mapping"):
        call_command("bootstrap_conference", config=config_path)


def test_bootstrap_missing_file_is_command_error(tmp_path):
    with pytest.raises(CommandError, match="Conference config file not found"):
        call_command("bootstrap_conference", config=str(tmp_path / "missing.toml"))
