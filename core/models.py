from __future__ import annotations

"""
Core data models shared across the project.

This module provides:
- Validation message constants shared by model fields and API serializers, so
  a blank or duplicate value reads the same whichever layer rejects it.
- `TimestampedModel`: abstract `created_at` / `updated_at` audit fields.
- `OwnedQuerySet` and `OwnedModel`: a consistent per-user ownership pattern
  with convenience filtering and an object-level ownership check.

Security & tenancy
------------------
- Owned domain models inherit from `OwnedModel` and say where their owner lives
  (`owner_lookup` on the queryset, `get_owner_id()` on the instance).
- List endpoints scope querysets via `.for_user(request.user)`; detail endpoints
  rely on `core.permissions.IsOwner`, which calls `is_owned_by()`.
"""

from django.db import models

CANT_BE_BLANK = "can't be blank"
ALREADY_TAKEN = "has already been taken"

# Django model field `error_messages` for required values.
REQUIRED_FIELD_ERRORS = {
    "blank": CANT_BE_BLANK,
    "null": CANT_BE_BLANK,
}

# DRF serializer field `error_messages` for required values.
REQUIRED_SERIALIZER_ERRORS = {
    "blank": CANT_BE_BLANK,
    "null": CANT_BE_BLANK,
    "required": CANT_BE_BLANK,
}


class TimestampedModel(models.Model):
    """Abstract base adding standard audit timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class OwnedQuerySet(models.QuerySet):
    """
    Query helpers for user-owned rows.

    Use explicitly in views to avoid accidental data leakage:
        Model.objects.for_user(request.user)

    Subclasses set `owner_lookup` to the ORM path of the owning user
    (e.g. "owner" or "project__owner").

    Notes:
        - Anonymous or unauthenticated users receive `none()` (no rows).
    """

    owner_lookup = "owner"

    def for_user(self, user):
        """Return rows owned by `user` or an empty queryset when unauthenticated."""
        if user is None or not getattr(user, "is_authenticated", False):
            return self.none()
        return self.filter(**{self.owner_lookup: user})

    # Alias for readability in call sites.
    def owned(self, user):
        """Alias for `for_user(user)` to improve intent clarity at call sites."""
        return self.for_user(user)


class OwnedModel(TimestampedModel):
    """
    Abstract base for per-user ownership + audit fields.

    Subclasses must implement `get_owner_id()`.

    Security:
        # SECURITY: Pair this with query scoping in views and object-level checks
        # (`core.permissions.IsOwner`) for robust tenant isolation.
    """

    class Meta:
        abstract = True

    def get_owner_id(self):
        """Primary key of the user who owns this row."""
        raise NotImplementedError

    def is_owned_by(self, user) -> bool:
        """Return True if the instance is owned by the given authenticated `user`."""
        return bool(
            user
            and getattr(user, "is_authenticated", False)
            and self.get_owner_id() == user.pk
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={getattr(self, 'id', None)} owner_id={self.get_owner_id()}>"
