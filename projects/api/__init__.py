# Explicit re-exports for URL wiring:
#   from projects.api import ProjectViewSet, NoteViewSet, DashboardView

from .dashboard import DashboardView
from .viewsets import NoteViewSet, ProjectViewSet

__all__ = [
    "DashboardView",
    "NoteViewSet",
    "ProjectViewSet",
]
