"""Game app configuration."""
from django.apps import AppConfig


class GameConfig(AppConfig):
    """Configuration for the backgammon rules app (positions, move generation)."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.game'
    verbose_name = 'Backgammon Rules'
