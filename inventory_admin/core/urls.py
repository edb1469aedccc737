from django.urls import path
from .views import (
    AdminLoginView, AdminTokenRefreshView, admin_me, admin_profile, admin_state,
    audit_log_list,
)

urlpatterns = [
    # Auth endpoints
    path('auth/admin/login', AdminLoginView.as_view(), name='admin-login'),
    path('auth/admin/refresh', AdminTokenRefreshView.as_view(), name='admin-token-refresh'),
    path('auth/admin/me', admin_me, name='admin-me'),
    path('auth/admin/profile', admin_profile, name='admin-profile'),
    path('auth/admin-state', admin_state, name='admin-state'),

    # AuditLog endpoints
    path('audit-logs', audit_log_list, name='audit-log-list'),
]
