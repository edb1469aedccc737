from django.urls import path
from .views import (
    banner_list_create, banner_detail, company_settings,
    policy_list_save, policy_by_type, public_policy, policy_publish, policy_delete,
    page_seo_list_save, page_seo_by_path, page_seo_delete,
    web_settings, web_settings_logo, web_settings_favicon,
)

urlpatterns = [
    path('banners', banner_list_create, name='banner-list-create'),
    path('banners/<int:pk>', banner_detail, name='banner-detail'),
    path('company', company_settings, name='company-settings'),
    path('policies', policy_list_save, name='policy-list-save'),
    path('policies/type/<str:policy_type>', policy_by_type, name='policy-by-type'),
    path('policies/public/<slug:slug>', public_policy, name='public-policy'),
    path('policies/<int:pk>/publish', policy_publish, name='policy-publish'),
    path('policies/<int:pk>', policy_delete, name='policy-delete'),
    path('seo', page_seo_list_save, name='page-seo-list-save'),
    path('seo/page/<path:page_path>', page_seo_by_path, name='page-seo-by-path'),
    path('seo/<int:pk>', page_seo_delete, name='page-seo-delete'),
    path('web-settings', web_settings, name='web-settings'),
    path('web-settings/logo', web_settings_logo, name='web-settings-logo'),
    path('web-settings/favicon', web_settings_favicon, name='web-settings-favicon'),
]
