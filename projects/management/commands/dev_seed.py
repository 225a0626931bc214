from __future__ import annotations

"""
Seed development data for the Task Tracker.

Goals
-----
- Fast local onboarding with deterministic sample data.
- Idempotent-ish: uses `get_or_create` so re-running keeps data consistent
  without creating duplicates.

What it creates
---------------
- Two users ("aaron@example.com", "jane@example.com") with a known password.
- Per user, projects due yesterday, today and next week (so the dashboard shows
  both late and upcoming work), each with a few notes.
- Size profiles (SMALL|MEDIUM|LARGE) scale the number of projects and notes.

Safety
------
- `--reset` deletes every project (and, by cascade, every note) across all users.
- `handle` runs in one transaction.

Usage
-----
    python manage.py dev_seed --size MEDIUM
    python manage.py dev_seed --reset --size SMALL
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Tuple

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandParser
from django.db import transaction
from django.utils import timezone

from projects.models import Note, Project

User = get_user_model()

SEED_PASSWORD = "dottle-nouveau-pavilion-tights-furze"

# (label, days from today)
DUE_OFFSETS = (
    ("due yesterday", -1),
    ("due today", 0),
    ("due next week", 7),
)


@dataclass(frozen=True)
class SizeProfile:
    """Relative scale factors for generated data (baseline is 'SMALL')."""
    project_rounds: int
    notes_per_project: int


SIZES = {
    "SMALL": SizeProfile(project_rounds=1, notes_per_project=2),
    "MEDIUM": SizeProfile(project_rounds=2, notes_per_project=5),
    "LARGE": SizeProfile(project_rounds=4, notes_per_project=10),
}


class Command(BaseCommand):
    """
    Seed deterministic development data for quick demos.

    Options:
        --reset  : delete existing projects and notes before creating new sample data
        --size   : SMALL (default), MEDIUM, LARGE
    """
    help = "Seed development data (idempotent). Use --reset to clear existing projects first."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--reset",
            action="store_true",
            default=False,
            help="Delete existing projects and notes for all users before seeding.",
        )
        parser.add_argument(
            "--size",
            type=str,
            choices=("SMALL", "MEDIUM", "LARGE"),
            default="SMALL",
            help="How much data to create.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        profile: SizeProfile = SIZES[options["size"].upper()]

        if options["reset"]:
            self._reset()

        aaron, jane = self._ensure_users()
        self.stdout.write(self.style.SUCCESS(f"Users ready: {aaron.email}, {jane.email}"))

        for user in (aaron, jane):
            self._seed_for_user(user, profile)

        self.stdout.write(self.style.SUCCESS("Seeding complete."))

    def _reset(self) -> None:
        # Notes go with their projects (FK cascade).
        Project.objects.all().delete()
        self.stdout.write(self.style.WARNING("Existing projects and notes deleted."))

    def _ensure_users(self) -> Tuple[User, User]:
        """
        Ensure two baseline users exist and have known credentials.

        Returns:
            (aaron, jane)
        """
        aaron, _ = User.objects.get_or_create(
            email="aaron@example.com",
            defaults={"first_name": "Aaron", "last_name": "Sumner", "is_staff": True},
        )
        aaron.set_password(SEED_PASSWORD)
        aaron.save(update_fields=["password"])

        jane, _ = User.objects.get_or_create(
            email="jane@example.com",
            defaults={"first_name": "Jane", "last_name": "Tester"},
        )
        jane.set_password(SEED_PASSWORD)
        jane.save(update_fields=["password"])

        return aaron, jane

    def _seed_for_user(self, user: User, profile: SizeProfile) -> None:
        today = timezone.localdate()
        projects = []
        for round_no in range(1, profile.project_rounds + 1):
            for label, days in DUE_OFFSETS:
                project, _ = Project.objects.get_or_create(
                    owner=user,
                    name=f"Sample project {round_no} ({label})",
                    defaults={
                        "description": "Sample project for testing purposes",
                        "due_on": today + timedelta(days=days),
                    },
                )
                projects.append(project)

        notes = 0
        for project in projects:
            for n in range(1, profile.notes_per_project + 1):
                _, created = Note.objects.get_or_create(
                    project=project,
                    user=user,
                    message=f"My important note #{n}.",
                )
                notes += int(created)

        self.stdout.write(self.style.SUCCESS(f"Seeded for {user.email}: {len(projects)} projects, {notes} new notes."))
