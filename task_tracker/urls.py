"""
Project URL configuration.

Surfaces
--------
- `/`: dashboard for the signed-in user (guests are redirected to sign-in).
- `/users/...`: session sign-in/out, sign-up and the current-user endpoint.
- `/projects/`: router-driven project CRUD.
- `/projects/<project_pk>/notes/`: notes nested under their project.
- `/admin/`: Django admin (back-office only).
- `/health/`: unauthenticated readiness probe.
- `/api/schema`, `/api/docs`, `/api/redoc`: OpenAPI schema & UIs.

Notes
-----
- `/users/sign_in` has no trailing slash; it is the exact target of guest
  redirects (`settings.LOGIN_URL`).
"""

from __future__ import annotations

from django.contrib import admin
from django.urls import include, path
from rest_framework.routers import SimpleRouter

from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
    SpectacularRedocView,
)

from accounts.views import MeView, SignInView, SignOutView, SignUpView
from core.views import health
from projects.api import DashboardView, NoteViewSet, ProjectViewSet

# ---------------------------------------------------------------------
# Router for top-level resources
# ---------------------------------------------------------------------
router = SimpleRouter()
router.register(r"projects", ProjectViewSet, basename="project")

# Notes are nested under a project; wired by hand to keep `project_pk` in the path.
note_list = NoteViewSet.as_view({"get": "list", "post": "create"})
note_detail = NoteViewSet.as_view(
    {"get": "retrieve", "put": "update", "patch": "partial_update", "delete": "destroy"}
)

# ---------------------------------------------------------------------
# URL patterns
# ---------------------------------------------------------------------
urlpatterns = [
    path("", DashboardView.as_view(), name="dashboard"),
    path("admin/", admin.site.urls),
    path("health/", health, name="health"),

    # OpenAPI / Docs
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),

    # --------------------------
    # Accounts
    # --------------------------
    path("users/sign_in", SignInView.as_view(), name="sign-in"),
    path("users/sign_out", SignOutView.as_view(), name="sign-out"),
    path("users/me/", MeView.as_view(), name="users-me"),
    path("users/", SignUpView.as_view(), name="sign-up"),

    # --------------------------
    # Projects & notes
    # --------------------------
    path("projects/<int:project_pk>/notes/", note_list, name="project-note-list"),
    path("projects/<int:project_pk>/notes/<int:pk>/", note_detail, name="project-note-detail"),
    path("", include(router.urls)),
]
