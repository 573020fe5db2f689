"""
Contact URL Configuration

Mounted under /api/. Trailing slashes are optional.
"""
from django.urls import re_path

from .views import ContactFormSubmitView, ContactListView, ContactStatsView, HealthView

app_name = 'contact'

# Public URLs (no auth required)
public_urlpatterns = [
    re_path(r'^health/?$', HealthView.as_view(), name='health'),
    re_path(r'^contact/?$', ContactFormSubmitView.as_view(), name='submit'),
]

# Admin URLs (bearer token required)
admin_urlpatterns = [
    re_path(r'^admin/stats/?$', ContactStatsView.as_view(), name='admin-stats'),
    re_path(r'^admin/contacts/?$', ContactListView.as_view(), name='admin-contacts'),
]

urlpatterns = public_urlpatterns + admin_urlpatterns
