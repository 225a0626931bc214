from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth import (
    authenticate,
    get_user_model,
    login as dj_login,
    logout as dj_logout,
)
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.middleware.csrf import get_token
from django.utils.translation import gettext_lazy as _
from rest_framework import permissions, serializers, status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiResponse

from core.models import ALREADY_TAKEN, REQUIRED_SERIALIZER_ERRORS

User = get_user_model()

logger = logging.getLogger(__name__)


class _UserPublicSerializer(serializers.Serializer):
    """Minimal public shape for the authenticated user."""
    id = serializers.IntegerField()
    email = serializers.EmailField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    name = serializers.CharField()


def _user_payload(user) -> dict:
    return _UserPublicSerializer(user).data


class _SignInSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class SignInView(APIView):
    """
    Sign-in entry point (the redirect target for guests).

    GET primes the CSRF cookie and exposes the token via header.
    POST starts a session using Django auth; throttled with scope `auth-sign-in`.
    """
    permission_classes = [permissions.AllowAny]
    throttle_scope = "auth-sign-in"

    def get_throttles(self):
        if self.request.method == "POST":
            return [ScopedRateThrottle()]
        return []

    @extend_schema(
        operation_id="users_sign_in_page",
        summary="Sign-in entry point (primes CSRF cookie)",
        responses={200: OpenApiResponse(description="CSRF cookie set")},
    )
    def get(self, request, *args, **kwargs):
        token = get_token(request)  # ensures cookie is set
        resp = Response({"detail": _("Sign in with your email and password.")}, status=status.HTTP_200_OK)
        resp["X-CSRFToken"] = token
        return resp

    @extend_schema(
        operation_id="users_sign_in",
        summary="Sign in (session-based)",
        request=_SignInSerializer,
        responses={
            200: _UserPublicSerializer,
            400: OpenApiResponse(
                description='{"detail":"Invalid email or password.","code":"invalid_credentials"}'
            ),
            429: OpenApiResponse(description="Too many attempts (throttled)"),
        },
    )
    def post(self, request, *args, **kwargs):
        ser = _SignInSerializer(data=request.data)
        if not ser.is_valid():
            return Response(
                {"detail": _("Invalid email or password."), "code": "invalid_credentials"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        user = authenticate(
            request,
            email=User.objects.normalize_email(ser.validated_data["email"]),
            password=ser.validated_data["password"],
        )
        if user is None or not user.is_active:
            logger.info("failed sign-in attempt")
            return Response(
                {"detail": _("Invalid email or password."), "code": "invalid_credentials"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        dj_login(request, user)
        return Response(_user_payload(user), status=status.HTTP_200_OK)


class SignOutView(APIView):
    """
    End the session (idempotent). CSRF enforced for signed-in sessions.
    """
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="users_sign_out",
        summary="Sign out",
        responses={204: OpenApiResponse(description="Signed out")},
    )
    def post(self, request, *args, **kwargs):
        dj_logout(request)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MeView(APIView):
    """
    Return the current authenticated user.
    """
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="users_me",
        summary="Current user",
        responses={200: _UserPublicSerializer, 401: OpenApiResponse(description="Not authenticated")},
    )
    def get(self, request, *args, **kwargs):
        # Explicit 401: session auth has no WWW-Authenticate header, so DRF would answer 403.
        if not request.user.is_authenticated:
            return Response({"detail": _("Not authenticated.")}, status=status.HTTP_401_UNAUTHORIZED)
        return Response(_user_payload(request.user), status=status.HTTP_200_OK)


# -----------------------------
# Sign-up
# -----------------------------
class _SignUpSerializer(serializers.ModelSerializer):
    """
    Registration payload. Messages match the model's own validation so the API
    and `full_clean()` agree ("can't be blank", "has already been taken").
    """

    password = serializers.CharField(write_only=True, trim_whitespace=False, error_messages=REQUIRED_SERIALIZER_ERRORS)

    class Meta:
        model = User
        fields = ["id", "first_name", "last_name", "email", "password"]
        read_only_fields = ["id"]
        extra_kwargs = {
            "first_name": {"error_messages": REQUIRED_SERIALIZER_ERRORS},
            "last_name": {"error_messages": REQUIRED_SERIALIZER_ERRORS},
            # Uniqueness is checked case-insensitively in `validate_email`.
            "email": {"error_messages": REQUIRED_SERIALIZER_ERRORS, "validators": []},
        }

    def validate_email(self, value):
        value = User.objects.normalize_email(value)
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError(ALREADY_TAKEN)
        return value

    def validate(self, attrs):
        candidate = User(
            email=attrs.get("email"),
            first_name=attrs.get("first_name"),
            last_name=attrs.get("last_name"),
        )
        try:
            validate_password(attrs.get("password"), user=candidate)
        except DjangoValidationError as exc:
            raise serializers.ValidationError({"password": list(exc.messages)})
        return attrs

    def create(self, validated_data):
        try:
            with transaction.atomic():
                return User.objects.create_user(**validated_data)
        except IntegrityError:
            # Lost a race with a concurrent sign-up; the unique index decided.
            raise serializers.ValidationError({"email": [ALREADY_TAKEN]})


class SignUpView(APIView):
    """
    Create a new user account.
    - Requires first name, last name, email and a strong password.
    - Throttled with scope `auth-sign-up`.
    - Signs the new user in on success.
    - Controlled by `ENABLE_REGISTRATION`.
    """
    permission_classes = [permissions.AllowAny]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "auth-sign-up"

    @extend_schema(
        operation_id="users_sign_up",
        summary="Register a new account",
        request=_SignUpSerializer,
        responses={
            201: _UserPublicSerializer,
            400: OpenApiResponse(description="Validation error"),
            403: OpenApiResponse(description="Registration disabled"),
            429: OpenApiResponse(description="Too many attempts (throttled)"),
        },
    )
    def post(self, request, *args, **kwargs):
        if not getattr(settings, "ENABLE_REGISTRATION", False):
            return Response(
                {"detail": _("Registration is disabled."), "code": "registration_disabled"},
                status=status.HTTP_403_FORBIDDEN,
            )

        ser = _SignUpSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        user = ser.save()
        dj_login(request, user)
        logger.info("user %s signed up", user.pk)

        return Response(_user_payload(user), status=status.HTTP_201_CREATED)
