"""Custom user model for Task Tracker.

Behavior
--------
- Email is the sign-in identifier; there is no username.
- `first_name`, `last_name` and `email` are required. Blank values fail
  `full_clean()` with "can't be blank"; a duplicate email fails with
  "has already been taken".
- Emails are stored lower-cased (`UserManager.normalize_email`, used by
  `create_user` and by `AbstractUser.clean()`), so
  uniqueness is effectively case-insensitive. The unique index on `email` is
  what guarantees it under concurrent sign-ups.
- `name` is the display name: first and last name joined by a space.
"""

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import ALREADY_TAKEN, REQUIRED_FIELD_ERRORS


class UserManager(BaseUserManager):
    """Manager for email-identified users."""

    use_in_migrations = True

    @classmethod
    def normalize_email(cls, email):
        return super().normalize_email(email).lower()

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("An email address is required.")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")
        return self._create_user(email, password, **extra_fields)

    def get_by_natural_key(self, username):
        return super().get_by_natural_key(self.normalize_email(username))


class User(AbstractUser):
    """
    Project's custom user model.

    Keeps Django's auth behavior (password hashing, permissions, admin flags)
    from `AbstractUser`, swapping the username for a unique email.
    """

    username = None
    first_name = models.CharField(_("first name"), max_length=150, error_messages=REQUIRED_FIELD_ERRORS)
    last_name = models.CharField(_("last name"), max_length=150, error_messages=REQUIRED_FIELD_ERRORS)
    email = models.EmailField(
        _("email address"),
        unique=True,
        error_messages={**REQUIRED_FIELD_ERRORS, "unique": ALREADY_TAKEN},
    )

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["first_name", "last_name"]

    objects = UserManager()

    class Meta(AbstractUser.Meta):
        ordering = ("last_name", "first_name", "email")

    @property
    def name(self) -> str:
        """Display name, e.g. "John Doe"."""
        return f"{self.first_name} {self.last_name}"

    def __str__(self) -> str:
        return self.email
