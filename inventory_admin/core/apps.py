from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'inventory_admin.core'
    label = 'core'

    def ready(self):
        """Import signals when app is ready"""
        import inventory_admin.core.cache_signals  # noqa: F401
