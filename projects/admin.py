"""
Django admin registrations for projects and notes.

Back-office only: intended for staff operators browsing and troubleshooting
data across owners.
"""

from __future__ import annotations

from django.contrib import admin

from .models import Note, Project


class NoteInline(admin.TabularInline):
    model = Note
    extra = 0
    fields = ("message", "user", "created_at")
    readonly_fields = ("created_at",)


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    """Projects with owner and due date; notes edited inline."""
    list_display = ("id", "name", "owner", "due_on", "created_at")
    search_fields = ("name", "description", "owner__email")
    list_filter = ("due_on",)
    date_hierarchy = "due_on"
    inlines = [NoteInline]


@admin.register(Note)
class NoteAdmin(admin.ModelAdmin):
    list_display = ("id", "project", "user", "created_at")
    search_fields = ("message", "project__name")
