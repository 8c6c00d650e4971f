"""Signals for the conference app."""

from django.db.models.signals import post_save
from django.dispatch import receiver

from django_conference_program.conference.models import Conference
from django_conference_program.programs.services import ProgramService
from django_conference_program.settings import get_config


@receiver(post_save, sender=Conference)
def create_program(
    sender: type[Conference],  # noqa: ARG001
    instance: Conference,
    *,
    created: bool,
    raw: bool = False,
    **kwargs: object,  # noqa: ARG001
) -> None:
    """Create the program, with its seeded defaults, when a new Conference is saved."""
    if not created or raw or not get_config().auto_create_program:
        return
    ProgramService.create_program(instance)
