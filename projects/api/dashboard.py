"""
Dashboard at `/`: the landing page for signed-in users.

This is also where signed-in users are sent when they reach for a project they
do not own. Guests are redirected to sign-in by the owner gate.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import extend_schema

from core.gate import OwnerGateMixin
from projects.models import Project
from projects.serializers import ProjectSerializer


class DashboardView(OwnerGateMixin, APIView):
    """The acting user's identity and projects (soonest due first)."""
    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="dashboard",
        tags=["Dashboard"],
        summary="Signed-in user's dashboard",
        responses={200: ProjectSerializer(many=True)},
    )
    def get(self, request, *args, **kwargs):
        user = request.user
        projects = Project.objects.for_user(user).order_by("due_on", "name")
        payload = {
            "user": {"id": user.pk, "email": user.email, "name": user.name},
            "late_count": projects.late().count(),
            "projects": ProjectSerializer(projects, many=True).data,
        }
        return Response(payload, status=status.HTTP_200_OK)
