"""Analysis app configuration."""
from django.apps import AppConfig


class AiConfig(AppConfig):
    """Configuration for the move analysis app (evaluation, rollouts, API)."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.ai'
    verbose_name = 'Move Analysis'
