from django.contrib import admin
from .models import Banner, CompanySettings, Policy, PageSEO, WebSettings


@admin.register(Banner)
class BannerAdmin(admin.ModelAdmin):
    list_display = ['title', 'sort_order', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['title']
    ordering = ['sort_order']


@admin.register(CompanySettings)
class CompanySettingsAdmin(admin.ModelAdmin):
    list_display = ['company_name', 'email', 'phone', 'city', 'updated_at']


@admin.register(Policy)
class PolicyAdmin(admin.ModelAdmin):
    list_display = ['title', 'policy_type', 'slug', 'version', 'is_active', 'is_published', 'last_updated']
    list_filter = ['policy_type', 'is_active', 'is_published']
    readonly_fields = ['version', 'last_updated', 'created_at', 'updated_at']


@admin.register(PageSEO)
class PageSEOAdmin(admin.ModelAdmin):
    list_display = ['page_path', 'page_name', 'meta_title', 'is_active']
    list_filter = ['is_active']
    search_fields = ['page_path', 'page_name', 'meta_title']


@admin.register(WebSettings)
class WebSettingsAdmin(admin.ModelAdmin):
    list_display = ['id', 'logo', 'favicon', 'updated_at']
