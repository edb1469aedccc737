from django.apps import AppConfig


class WebConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'inventory_admin.web'
    label = 'web'
    verbose_name = 'Storefront content'
