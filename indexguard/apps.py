from django.apps import AppConfig


class IndexguardConfig(AppConfig):
    """Configuration for the indexguard Django app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'indexguard'
    verbose_name = 'Index guard'

    def ready(self) -> None:
        from .conf import get_hash_store
        from .engine import duplicates

        duplicates.set_default_store(get_hash_store())
