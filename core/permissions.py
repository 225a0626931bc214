"""
Permission helpers used across the API.

This module exposes:
- `can_access(resource, actor)`: the single ownership predicate reused by every
  show/update/destroy path (and by nested resources via their parent).
- `IsOwner`: DRF object-level guard built on `can_access`.

Usage
-----
- Combine with authentication and scope list querysets by `request.user`:
      permission_classes = [IsAuthenticated, IsOwner]
      def get_queryset(self):
          return Model.objects.for_user(self.request.user)

Security
--------
# SECURITY: Always scope list/queryset endpoints by `request.user` in addition to
# object-level checks to avoid leaking other users' rows through listings.
"""

from rest_framework.permissions import BasePermission


def can_access(resource, actor) -> bool:
    """
    True when `actor` is an authenticated user who owns `resource`.

    `resource` is any `core.models.OwnedModel`; anonymous users and `None`
    never have access.
    """
    if actor is None or not getattr(actor, "is_authenticated", False):
        return False
    return resource.is_owned_by(actor)


class IsOwner(BasePermission):
    """
    Object-level permission: only the owner can access/mutate.

    Use in ViewSets with:
        permission_classes = [IsAuthenticated, IsOwner]

    Notes:
        - Works in tandem with queryset scoping in `get_queryset()`.
        - Returns False for anonymous or unauthenticated users.
    """

    message = "You are not authorized to access that resource."

    def has_object_permission(self, request, view, obj) -> bool:
        return can_access(obj, getattr(request, "user", None))
