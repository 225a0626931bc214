from django.conf import settings
from django.db import models
from django.utils import timezone

from core.models import ALREADY_TAKEN, REQUIRED_FIELD_ERRORS, OwnedModel, OwnedQuerySet


class ProjectQuerySet(OwnedQuerySet):
    owner_lookup = "owner"

    def late(self):
        """Projects whose due date has already passed."""
        return self.filter(due_on__lt=timezone.localdate())


class Project(OwnedModel):
    """
    A user's project. The owner is set once at creation and is the only user
    allowed to read, change or delete it. Deleting a project deletes its notes.
    """
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="projects",
    )
    name = models.CharField(max_length=200, error_messages=REQUIRED_FIELD_ERRORS)
    description = models.TextField(blank=True)
    due_on = models.DateField(null=True, blank=True)

    objects = ProjectQuerySet.as_manager()

    class Meta:
        ordering = ["due_on", "name"]
        constraints = [
            models.UniqueConstraint(
                fields=["owner", "name"],
                name="uniq_project_name_per_owner",
                violation_error_message=ALREADY_TAKEN,
            )
        ]
        indexes = [
            models.Index(fields=["owner", "due_on"], name="project_owner_due_on_idx"),
        ]

    def __str__(self) -> str:
        return self.name

    def get_owner_id(self):
        return self.owner_id

    @property
    def late(self) -> bool:
        """True once the due date is in the past (today is not late)."""
        return self.due_on is not None and self.due_on < timezone.localdate()


class NoteQuerySet(OwnedQuerySet):
    owner_lookup = "project__owner"

    def search(self, term: str):
        """Notes whose message contains `term` (case-insensitive)."""
        return self.filter(message__icontains=term)


class Note(OwnedModel):
    """
    A message attached to a project.

    `user` is the author and always the project's owner: it defaults to
    `project.owner` on save, and the API only lets that owner create notes.
    """
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="notes")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notes",
    )
    message = models.TextField(error_messages=REQUIRED_FIELD_ERRORS)

    objects = NoteQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["project", "created_at"], name="note_project_created_idx"),
        ]

    def __str__(self) -> str:
        return self.message[:50]

    def save(self, *args, **kwargs):
        if self.user_id is None and self.project_id is not None:
            self.user_id = self.project.owner_id
        super().save(*args, **kwargs)

    def get_owner_id(self):
        return self.project.owner_id
