from __future__ import annotations

"""
ViewSets for projects and their notes, behind the owner gate.

Highlights
----------
- `OwnerGatedViewSet`:
  * Requires authentication and object-level ownership (`IsOwner`).
  * Guests are redirected to sign-in; signed-in non-owners are redirected to
    the dashboard (`core.gate.OwnerGateMixin`). Nothing is read or written for
    either of them.
- `ProjectViewSet`: list is scoped to the acting user; detail routes look the
  project up across all owners so that somebody else's project is answered
  with the "not yours" redirect and an unknown id with 404.
- `NoteViewSet`: nested under `/projects/<project_pk>/notes/`; the gate runs
  against the parent project before any note is touched.

Transactions
------------
- Destroying a project removes its notes through the FK cascade inside one
  atomic block.
"""

import logging

from django.db import transaction
from rest_framework import viewsets
from rest_framework.generics import get_object_or_404
from rest_framework.permissions import IsAuthenticated

from drf_spectacular.utils import extend_schema_view, extend_schema

from core.gate import OwnerGateMixin
from core.permissions import IsOwner
from projects.filters import ProjectFilter
from projects.models import Note, Project
from projects.serializers import NoteSerializer, ProjectSerializer

logger = logging.getLogger(__name__)


class OwnerGatedViewSet(OwnerGateMixin, viewsets.ModelViewSet):
    """
    Base ViewSet for owned resources.

    Features:
        - Requires `IsAuthenticated` and `IsOwner` (object-level).
        - Authentication/authorization failures become redirects.
    """
    permission_classes = [IsAuthenticated, IsOwner]
    lookup_value_regex = r"\d+"

    def filter_queryset(self, queryset):
        """
        Filters, search and ordering apply to listings only. Detail lookups
        ignore query params so the gate answers the same whatever they say.
        """
        if self.action != "list":
            return queryset
        return super().filter_queryset(queryset)


@extend_schema_view(
    list=extend_schema(tags=["Projects"], description="List the signed-in user's projects."),
    retrieve=extend_schema(tags=["Projects"], description="Retrieve a project (owner only)."),
    create=extend_schema(tags=["Projects"], description="Create a project owned by the signed-in user."),
    update=extend_schema(tags=["Projects"], description="Update a project (owner only)."),
    partial_update=extend_schema(tags=["Projects"], description="Partial update a project (owner only)."),
    destroy=extend_schema(tags=["Projects"], description="Delete a project and its notes (owner only)."),
)
class ProjectViewSet(OwnerGatedViewSet):
    """Project CRUD with due-date filters, search and ordering."""
    queryset = Project.objects.select_related("owner").all()
    serializer_class = ProjectSerializer
    filterset_class = ProjectFilter
    search_fields = ["name", "description"]
    ordering_fields = ["due_on", "name", "created_at", "updated_at"]
    ordering = ["due_on", "name"]

    def get_queryset(self):
        """
        Lists only ever show the acting user's projects. Detail routes see every
        project so `IsOwner` can tell "not yours" apart from "does not exist".
        """
        base_qs = super().get_queryset()
        if self.action == "list":
            return base_qs.for_user(self.request.user)
        return base_qs

    def perform_create(self, serializer):
        """The acting user becomes the owner."""
        instance = serializer.save(owner=self.request.user)
        logger.info("project %s created by user %s", instance.pk, self.request.user.pk)

    def perform_update(self, serializer):
        instance = serializer.save()
        logger.info("project %s updated by user %s", instance.pk, self.request.user.pk)

    def perform_destroy(self, instance):
        """Delete the project and, through the FK cascade, its notes."""
        pk = instance.pk
        with transaction.atomic():
            instance.delete()
        logger.info("project %s deleted by user %s", pk, self.request.user.pk)


@extend_schema_view(
    list=extend_schema(tags=["Notes"], description="List a project's notes (project owner only)."),
    retrieve=extend_schema(tags=["Notes"], description="Retrieve a note."),
    create=extend_schema(tags=["Notes"], description="Add a note to a project."),
    update=extend_schema(tags=["Notes"], description="Update a note."),
    partial_update=extend_schema(tags=["Notes"], description="Partial update a note."),
    destroy=extend_schema(tags=["Notes"], description="Delete a note."),
)
class NoteViewSet(OwnerGatedViewSet):
    """Note CRUD nested under a project; `?search=` matches the message text."""
    queryset = Note.objects.select_related("project").all()
    serializer_class = NoteSerializer
    search_fields = ["message"]
    ordering_fields = ["created_at", "updated_at"]
    ordering = ["-created_at"]

    def initial(self, request, *args, **kwargs):
        """
        After authentication, resolve the parent project and run the gate on it.

        A missing project is a 404; somebody else's project is a redirect.
        """
        super().initial(request, *args, **kwargs)
        self.project = get_object_or_404(Project.objects.all(), pk=self.kwargs["project_pk"])
        self.check_object_permissions(request, self.project)

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            # Schema generation never runs `initial()`.
            return Note.objects.none()
        return super().get_queryset().filter(project=self.project)

    def perform_create(self, serializer):
        instance = serializer.save(project=self.project, user=self.request.user)
        logger.info("note %s added to project %s", instance.pk, self.project.pk)
