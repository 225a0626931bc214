"""AppConfig for the `core` app.

Scope
-----
Holds shared infrastructure pieces used across the project:
- the owner gate (permissions, gate exceptions, redirecting view mixin),
- the owned-model base classes and validation messages,
- middleware and logging helpers (request-id),
- the health probe.
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Standard Django AppConfig; keep defaults lightweight."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core'
