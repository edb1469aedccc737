"""
URL configuration for the inventory admin API.

Every app mounts its routes under /api/<area>/ to match the paths the
admin frontend calls (e.g. /api/inventory/items, /api/web/banners).
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

admin.site.site_header = "Inventory Admin Panel"
admin.site.site_title = "Inventory Admin Portal"
admin.site.index_title = "Inventory & Storefront Administration"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('inventory_admin.core.urls')),
    path('api/inventory/', include('inventory_admin.locations.urls')),
    path('api/inventory/', include('inventory_admin.catalog.urls')),
    path('api/inventory/', include('inventory_admin.inventory.urls')),
    path('api/online/', include('inventory_admin.catalog.online_urls')),
    path('api/purchase/', include('inventory_admin.parties.urls')),
    path('api/purchase/', include('inventory_admin.purchasing.urls')),
    path('api/', include('inventory_admin.finance.urls')),
    path('api/web/', include('inventory_admin.web.urls')),
    re_path(r'^media/(?P<path>.*)$', serve, {'document_root': settings.MEDIA_ROOT}),
]
