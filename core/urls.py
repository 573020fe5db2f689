"""
URL configuration for the Zyph Technologies website API.

    /api/health            health check
    /api/contact           public contact form
    /api/admin/stats       submission statistics (bearer token)
    /api/admin/contacts    submission listing (bearer token)
    /django-admin/         Django admin
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('django-admin/', admin.site.urls),
    path('api/', include('contact.urls')),
]

handler404 = 'core.views.not_found'
handler500 = 'core.views.server_error'
