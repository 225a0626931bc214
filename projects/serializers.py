"""
DRF serializers for projects and notes.

Security & tenancy
------------------
- `owner` (projects) and `project`/`user` (notes) are read-only; views set them
  from `request.user` and the URL.
- Required-field and uniqueness messages match the models ("can't be blank",
  "has already been taken").
"""

from __future__ import annotations

from django.db import IntegrityError, transaction
from rest_framework import serializers

from core.models import ALREADY_TAKEN, REQUIRED_SERIALIZER_ERRORS

from .models import Note, Project


class ProjectSerializer(serializers.ModelSerializer):
    """CRUD representation of `Project`; `late` is derived from `due_on`."""
    late = serializers.BooleanField(read_only=True)

    class Meta:
        model = Project
        fields = [
            "id",
            "name",
            "description",
            "due_on",
            "late",
            "owner",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "late", "owner", "created_at", "updated_at"]
        extra_kwargs = {
            "name": {"error_messages": REQUIRED_SERIALIZER_ERRORS},
        }

    def validate_name(self, value):
        """Project names are unique per owner."""
        if self.instance is not None:
            owner = self.instance.owner
        else:
            owner = self.context["request"].user
        clashes = Project.objects.filter(owner=owner, name=value)
        if self.instance is not None:
            clashes = clashes.exclude(pk=self.instance.pk)
        if clashes.exists():
            raise serializers.ValidationError(ALREADY_TAKEN)
        return value

    def create(self, validated_data):
        try:
            with transaction.atomic():
                return super().create(validated_data)
        except IntegrityError:
            # A concurrent request took the name after `validate_name` ran.
            raise serializers.ValidationError({"name": [ALREADY_TAKEN]})

    def update(self, instance, validated_data):
        try:
            with transaction.atomic():
                return super().update(instance, validated_data)
        except IntegrityError:
            raise serializers.ValidationError({"name": [ALREADY_TAKEN]})


class NoteSerializer(serializers.ModelSerializer):
    """Notes are always read and written in the context of their project."""

    class Meta:
        model = Note
        fields = ["id", "project", "user", "message", "created_at", "updated_at"]
        read_only_fields = ["id", "project", "user", "created_at", "updated_at"]
        extra_kwargs = {
            "message": {"error_messages": REQUIRED_SERIALIZER_ERRORS},
        }
