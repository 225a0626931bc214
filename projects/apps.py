"""AppConfig for the `projects` domain app (projects, notes, dashboard)."""

from django.apps import AppConfig


class ProjectsConfig(AppConfig):
    """Primary app configuration for project/note models and APIs."""
    default_auto_field = "django.db.models.BigAutoField"
    name = "projects"
