"""
Project endpoints behind the owner gate.

What these tests verify
-----------------------
- **Guests**: every action answers 302 to `/users/sign_in` and changes nothing.
- **Non-owners**: show/update/destroy answer 302 to the dashboard (`/`) and
  leave the project untouched.
- **Owners**: list/show return 200; create adds exactly one project owned by
  the acting user; update persists (re-read from the DB); destroy removes
  exactly one project and its notes.
- Invalid attributes are rejected with field-keyed messages and no write.
- An unknown id is a 404, distinct from the "not yours" redirect.

Notes
-----
- `force_login` stands in for a real session sign-in; the session endpoints
  have their own tests in `accounts`.
"""

from unittest.mock import patch

from django.utils import timezone
from rest_framework.test import APIClient, APITestCase

from core.tests.factories import (
    create_project,
    create_project_due_today,
    create_project_due_tomorrow,
    create_project_due_yesterday,
    create_user,
    project_attributes,
)
from projects.models import Note, Project
from projects.serializers import ProjectSerializer

SIGN_IN_URL = "/users/sign_in"
ROOT_URL = "/"


def detail_url(project) -> str:
    return f"/projects/{project.pk}/"


class ProjectIndexTests(APITestCase):

    def setUp(self):
        self.user = create_user()
        self.client = APIClient()

    def test_authenticated_user_gets_200(self):
        self.client.force_login(self.user)
        r = self.client.get("/projects/")
        self.assertEqual(r.status_code, 200)

    def test_lists_only_own_projects(self):
        mine = create_project(owner=self.user)
        create_project(owner=create_user())
        self.client.force_login(self.user)
        r = self.client.get("/projects/")
        self.assertEqual(r.data["count"], 1)
        self.assertEqual(r.data["results"][0]["id"], mine.id)
        self.assertEqual(r.data["results"][0]["owner"], self.user.id)

    def test_guest_gets_302(self):
        r = self.client.get("/projects/")
        self.assertEqual(r.status_code, 302)

    def test_guest_is_redirected_to_sign_in(self):
        r = self.client.get("/projects/")
        self.assertRedirects(r, SIGN_IN_URL, fetch_redirect_response=False)


class ProjectShowTests(APITestCase):

    def setUp(self):
        self.user = create_user()
        self.client = APIClient()

    def test_owner_gets_200(self):
        project = create_project(owner=self.user)
        self.client.force_login(self.user)
        r = self.client.get(detail_url(project))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["name"], project.name)
        self.assertFalse(r.data["late"])

    def test_non_owner_is_redirected_to_dashboard(self):
        project = create_project(owner=create_user())
        self.client.force_login(self.user)
        r = self.client.get(detail_url(project))
        self.assertRedirects(r, ROOT_URL, fetch_redirect_response=False)

    def test_guest_is_redirected_to_sign_in(self):
        project = create_project()
        r = self.client.get(detail_url(project))
        self.assertRedirects(r, SIGN_IN_URL, fetch_redirect_response=False)

    def test_unknown_id_is_404(self):
        self.client.force_login(self.user)
        r = self.client.get("/projects/999999/")
        self.assertEqual(r.status_code, 404)


class ProjectCreateTests(APITestCase):

    def setUp(self):
        self.user = create_user()
        self.client = APIClient()

    def test_valid_attributes_add_a_project(self):
        self.client.force_login(self.user)
        before = self.user.projects.count()
        r = self.client.post("/projects/", project_attributes(), format="json")
        self.assertEqual(r.status_code, 201, r.data)
        self.assertEqual(self.user.projects.count(), before + 1)
        self.assertEqual(Project.objects.get(pk=r.data["id"]).owner, self.user)

    def test_client_supplied_owner_is_ignored(self):
        other = create_user()
        self.client.force_login(self.user)
        r = self.client.post("/projects/", project_attributes(owner=other.id), format="json")
        self.assertEqual(r.status_code, 201, r.data)
        self.assertEqual(r.data["owner"], self.user.id)
        self.assertEqual(other.projects.count(), 0)

    def test_invalid_attributes_do_not_add_a_project(self):
        self.client.force_login(self.user)
        r = self.client.post("/projects/", project_attributes(invalid=True), format="json")
        self.assertEqual(r.status_code, 400)
        self.assertIn("can't be blank", r.data["name"])
        self.assertEqual(self.user.projects.count(), 0)

    def test_blank_name_is_rejected(self):
        self.client.force_login(self.user)
        r = self.client.post("/projects/", project_attributes(name=""), format="json")
        self.assertEqual(r.status_code, 400)
        self.assertIn("can't be blank", r.data["name"])

    def test_duplicate_name_for_same_owner_is_rejected(self):
        create_project(owner=self.user, name="Paint the fence")
        self.client.force_login(self.user)
        r = self.client.post("/projects/", project_attributes(name="Paint the fence"), format="json")
        self.assertEqual(r.status_code, 400)
        self.assertIn("has already been taken", r.data["name"])
        self.assertEqual(self.user.projects.count(), 1)

    def test_guest_gets_302_and_nothing_is_saved(self):
        r = self.client.post("/projects/", project_attributes(), format="json")
        self.assertEqual(r.status_code, 302)
        self.assertEqual(Project.objects.count(), 0)

    def test_guest_is_redirected_to_sign_in(self):
        r = self.client.post("/projects/", project_attributes(), format="json")
        self.assertRedirects(r, SIGN_IN_URL, fetch_redirect_response=False)


class ProjectUpdateTests(APITestCase):

    def setUp(self):
        self.user = create_user()
        self.client = APIClient()

    def test_owner_updates_a_project(self):
        project = create_project(owner=self.user)
        self.client.force_login(self.user)
        r = self.client.patch(
            detail_url(project), project_attributes(name="New Project Name"), format="json"
        )
        self.assertEqual(r.status_code, 200, r.data)
        project.refresh_from_db()
        self.assertEqual(project.name, "New Project Name")

    def test_owner_full_update_with_put(self):
        project = create_project(owner=self.user)
        self.client.force_login(self.user)
        attrs = project_attributes(name="Renamed", description="")
        r = self.client.put(detail_url(project), attrs, format="json")
        self.assertEqual(r.status_code, 200, r.data)
        project.refresh_from_db()
        self.assertEqual(project.name, "Renamed")
        self.assertEqual(project.description, "")

    def test_owner_may_keep_the_same_name(self):
        project = create_project(owner=self.user, name="Same Old Name")
        self.client.force_login(self.user)
        r = self.client.patch(detail_url(project), {"name": "Same Old Name", "description": "x"}, format="json")
        self.assertEqual(r.status_code, 200, r.data)

    def test_owner_invalid_update_is_rejected(self):
        project = create_project(owner=self.user, name="Same Old Name")
        self.client.force_login(self.user)
        r = self.client.patch(detail_url(project), {"name": ""}, format="json")
        self.assertEqual(r.status_code, 400)
        project.refresh_from_db()
        self.assertEqual(project.name, "Same Old Name")

    def test_owner_cannot_reassign_owner(self):
        project = create_project(owner=self.user)
        other = create_user()
        self.client.force_login(self.user)
        self.client.patch(detail_url(project), {"owner": other.id}, format="json")
        project.refresh_from_db()
        self.assertEqual(project.owner, self.user)

    def test_non_owner_does_not_update_the_project(self):
        project = create_project(owner=create_user(), name="Same Old Name")
        self.client.force_login(self.user)
        self.client.patch(detail_url(project), project_attributes(name="New Name"), format="json")
        project.refresh_from_db()
        self.assertEqual(project.name, "Same Old Name")

    def test_non_owner_is_redirected_to_dashboard(self):
        project = create_project(owner=create_user())
        self.client.force_login(self.user)
        r = self.client.patch(detail_url(project), project_attributes(), format="json")
        self.assertRedirects(r, ROOT_URL, fetch_redirect_response=False)

    def test_guest_gets_302(self):
        project = create_project()
        r = self.client.patch(detail_url(project), project_attributes(), format="json")
        self.assertEqual(r.status_code, 302)

    def test_guest_is_redirected_to_sign_in_and_nothing_changes(self):
        project = create_project(name="Same Old Name")
        r = self.client.patch(detail_url(project), project_attributes(name="New Name"), format="json")
        self.assertRedirects(r, SIGN_IN_URL, fetch_redirect_response=False)
        project.refresh_from_db()
        self.assertEqual(project.name, "Same Old Name")


class ProjectDestroyTests(APITestCase):

    def setUp(self):
        self.user = create_user()
        self.client = APIClient()

    def test_owner_deletes_a_project(self):
        project = create_project(owner=self.user)
        self.client.force_login(self.user)
        before = self.user.projects.count()
        r = self.client.delete(detail_url(project))
        self.assertEqual(r.status_code, 204)
        self.assertEqual(self.user.projects.count(), before - 1)

    def test_owner_delete_removes_notes_and_spares_other_users(self):
        project = create_project(owner=self.user, with_notes=5)
        other_project = create_project(owner=create_user(), with_notes=2)
        self.client.force_login(self.user)
        self.client.delete(detail_url(project))
        self.assertFalse(Note.objects.filter(project_id=project.pk).exists())
        self.assertEqual(other_project.notes.count(), 2)
        self.assertTrue(Project.objects.filter(pk=other_project.pk).exists())

    def test_non_owner_does_not_delete_the_project(self):
        project = create_project(owner=create_user())
        self.client.force_login(self.user)
        before = Project.objects.count()
        self.client.delete(detail_url(project))
        self.assertEqual(Project.objects.count(), before)

    def test_non_owner_is_redirected_to_dashboard(self):
        project = create_project(owner=create_user())
        self.client.force_login(self.user)
        r = self.client.delete(detail_url(project))
        self.assertRedirects(r, ROOT_URL, fetch_redirect_response=False)

    def test_guest_gets_302(self):
        project = create_project()
        r = self.client.delete(detail_url(project))
        self.assertEqual(r.status_code, 302)

    def test_guest_is_redirected_to_sign_in(self):
        project = create_project()
        r = self.client.delete(detail_url(project))
        self.assertRedirects(r, SIGN_IN_URL, fetch_redirect_response=False)

    def test_guest_does_not_delete_the_project(self):
        create_project()
        before = Project.objects.count()
        self.client.delete(f"/projects/{Project.objects.get().pk}/")
        self.assertEqual(Project.objects.count(), before)


class ProjectLifecycleScenarioTests(APITestCase):
    """Owner creates, a stranger fails to rename, owner deletes."""

    def test_create_foreign_update_then_delete(self):
        owner = create_user()
        stranger = create_user()
        client = APIClient()

        client.force_login(owner)
        r = client.post("/projects/", project_attributes(name="Test"), format="json")
        self.assertEqual(r.status_code, 201, r.data)
        self.assertEqual(owner.projects.count(), 1)
        project = Project.objects.get(pk=r.data["id"])

        client.force_login(stranger)
        r = client.patch(detail_url(project), {"name": "Hijacked"}, format="json")
        self.assertRedirects(r, ROOT_URL, fetch_redirect_response=False)
        project.refresh_from_db()
        self.assertEqual(project.name, "Test")

        client.force_login(owner)
        r = client.delete(detail_url(project))
        self.assertEqual(r.status_code, 204)
        self.assertEqual(owner.projects.count(), 0)


class ProjectListFilterTests(APITestCase):

    def setUp(self):
        self.user = create_user()
        self.client = APIClient()
        self.client.force_login(self.user)
        self.late = create_project_due_yesterday(owner=self.user, name="Alpha fence")
        self.today = create_project_due_today(owner=self.user, name="Bravo roof")
        self.upcoming = create_project_due_tomorrow(owner=self.user, name="Charlie fence")
        self.undated = create_project(owner=self.user, name="Delta shed", due_on=None)

    def _ids(self, params) -> list:
        r = self.client.get("/projects/", params)
        self.assertEqual(r.status_code, 200)
        return [row["id"] for row in r.data["results"]]

    def test_late_true(self):
        self.assertEqual(self._ids({"late": "true"}), [self.late.id])

    def test_late_false_keeps_undated(self):
        ids = self._ids({"late": "false"})
        self.assertNotIn(self.late.id, ids)
        self.assertIn(self.undated.id, ids)
        self.assertEqual(len(ids), 3)

    def test_due_before_is_inclusive(self):
        today = timezone.localdate().isoformat()
        self.assertEqual(set(self._ids({"due_before": today})), {self.late.id, self.today.id})

    def test_due_after_is_inclusive(self):
        today = timezone.localdate().isoformat()
        self.assertEqual(set(self._ids({"due_after": today})), {self.today.id, self.upcoming.id})

    def test_search_matches_name(self):
        self.assertEqual(set(self._ids({"search": "fence"})), {self.late.id, self.upcoming.id})

    def test_ordering_by_name_descending(self):
        ids = self._ids({"ordering": "-name"})
        self.assertEqual(ids, [self.undated.id, self.upcoming.id, self.today.id, self.late.id])

    def test_filters_never_leak_other_owners(self):
        create_project_due_yesterday(owner=create_user(), name="Alpha fence")
        self.assertEqual(self._ids({"late": "true"}), [self.late.id])

    def test_late_flag_in_payload(self):
        r = self.client.get(detail_url(self.late))
        self.assertTrue(r.data["late"])


class ProjectDetailQueryParamTests(APITestCase):
    """List filters never change what a detail route answers."""

    def setUp(self):
        self.user = create_user()
        self.client = APIClient()
        self.foreign = create_project_due_tomorrow(owner=create_user(), name="Quarterly merger")
        self.client.force_login(self.user)

    def test_non_owner_show_redirects_whether_or_not_search_matches(self):
        for term in ("merger", "zzz"):
            r = self.client.get(detail_url(self.foreign), {"search": term})
            self.assertRedirects(r, ROOT_URL, fetch_redirect_response=False)

    def test_non_owner_show_redirects_whatever_the_due_filters_say(self):
        for params in ({"due_before": "1900-01-01"}, {"due_after": "2999-01-01"}, {"late": "true"}):
            r = self.client.get(detail_url(self.foreign), params)
            self.assertRedirects(r, ROOT_URL, fetch_redirect_response=False)

    def test_non_owner_delete_with_filter_redirects_and_keeps_project(self):
        r = self.client.delete(f"{detail_url(self.foreign)}?due_before=1900-01-01")
        self.assertRedirects(r, ROOT_URL, fetch_redirect_response=False)
        self.assertTrue(Project.objects.filter(pk=self.foreign.pk).exists())

    def test_owner_show_ignores_non_matching_filters(self):
        mine = create_project_due_tomorrow(owner=self.user)
        r = self.client.get(detail_url(mine), {"late": "true", "search": "zzz"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["id"], mine.id)


class ProjectNameRaceTests(APITestCase):
    """The unique index still answers 400 when the serializer check is bypassed."""

    def setUp(self):
        self.user = create_user()
        self.client = APIClient()
        self.client.force_login(self.user)
        self.existing = create_project(owner=self.user, name="Paint the fence")

    def test_create_duplicate_reports_taken(self):
        with patch.object(ProjectSerializer, "validate_name", lambda self, value: value):
            r = self.client.post("/projects/", project_attributes(name="Paint the fence"), format="json")
        self.assertEqual(r.status_code, 400)
        self.assertIn("has already been taken", r.data["name"])
        self.assertEqual(self.user.projects.count(), 1)

    def test_update_duplicate_reports_taken(self):
        other = create_project(owner=self.user, name="Fix the roof")
        with patch.object(ProjectSerializer, "validate_name", lambda self, value: value):
            r = self.client.patch(detail_url(other), {"name": "Paint the fence"}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertIn("has already been taken", r.data["name"])
        other.refresh_from_db()
        self.assertEqual(other.name, "Fix the roof")
