"""WSGI config for the inventory admin API."""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'inventory_admin.config.settings')

application = get_wsgi_application()
