"""
Gate outcomes raised by the owner gate.

Both are expected outcomes rather than crashes. `core.gate.OwnerGateMixin`
turns them into redirects; any view without the mixin still gets DRF's
standard 403 JSON because they subclass DRF's own exceptions.
"""

from django.utils.translation import gettext_lazy as _
from rest_framework import exceptions


class AuthenticationRequired(exceptions.NotAuthenticated):
    """No acting user on the request; answered with a redirect to sign-in."""
    default_detail = _("You need to sign in before continuing.")
    default_code = "authentication_required"


class AuthorizationDenied(exceptions.PermissionDenied):
    """Acting user does not own the target resource; answered with a redirect to root."""
    default_detail = _("You are not authorized to access that resource.")
    default_code = "authorization_denied"
