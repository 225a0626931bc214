"""
Owner gate for API views: turns authentication/authorization failures into redirects.

Request flow
------------
    Start -> AuthCheck -> Redirected (sign-in)
                       -> OwnershipCheck -> Redirected (root)
                                         -> Execute -> Responded

- DRF calls `permission_denied()` when a permission class refuses. With session
  auth and no authenticated user that means "sign in first"
  (`AuthenticationRequired`); otherwise the actor is not the owner
  (`AuthorizationDenied`).
- `handle_exception()` answers those two with a 302. Everything else (404s,
  validation errors, CSRF failures) keeps DRF's default JSON handling.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.http import HttpResponseRedirect
from django.shortcuts import resolve_url

from .exceptions import AuthenticationRequired, AuthorizationDenied

logger = logging.getLogger(__name__)


class OwnerGateMixin:
    """
    Mix into any DRF `APIView`/`ViewSet` whose permission failures should redirect.

    Redirect targets come from settings:
        LOGIN_URL                          -> guests
        AUTHORIZATION_DENIED_REDIRECT_URL  -> signed-in non-owners
    """

    def permission_denied(self, request, message=None, code=None):
        if request.authenticators and not request.successful_authenticator:
            raise AuthenticationRequired()
        raise AuthorizationDenied(detail=message, code=code)

    def handle_exception(self, exc):
        if isinstance(exc, AuthenticationRequired):
            logger.info("guest redirected to sign-in from %s %s", self.request.method, self.request.path)
            return HttpResponseRedirect(resolve_url(settings.LOGIN_URL))
        if isinstance(exc, AuthorizationDenied):
            logger.warning(
                "user %s denied %s %s",
                getattr(self.request.user, "pk", None),
                self.request.method,
                self.request.path,
            )
            return HttpResponseRedirect(resolve_url(settings.AUTHORIZATION_DENIED_REDIRECT_URL))
        return super().handle_exception(exc)
