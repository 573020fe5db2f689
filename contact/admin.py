"""
Contact Django Admin Configuration

Submissions are read-only here; status follow-up is the only field
staff can change.
"""
from django.contrib import admin

from .models import ContactSubmission, ContactFormRateLimit


@admin.register(ContactSubmission)
class ContactSubmissionAdmin(admin.ModelAdmin):
    """Admin interface for contact submissions."""

    list_display = [
        'name', 'company', 'email', 'phone', 'status', 'created_at'
    ]

    list_filter = [
        'status', 'created_at'
    ]

    search_fields = [
        'name', 'company', 'email', 'message'
    ]

    readonly_fields = [
        'id', 'name', 'company', 'email', 'phone', 'message',
        'ip_address', 'created_at'
    ]

    fieldsets = (
        ('Contact Information', {
            'fields': ('name', 'company', 'email', 'phone', 'message')
        }),
        ('Follow-up', {
            'fields': ('status',)
        }),
        ('Tracking', {
            'fields': ('id', 'ip_address', 'created_at'),
            'classes': ('collapse',)
        }),
    )

    def has_add_permission(self, request):
        """Submissions only come from the contact form."""
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(ContactFormRateLimit)
class ContactFormRateLimitAdmin(admin.ModelAdmin):
    """Admin interface for rate limiting."""

    list_display = [
        'identifier', 'recent_hits', 'created_at'
    ]

    search_fields = [
        'identifier'
    ]

    readonly_fields = [
        'identifier', 'created_at'
    ]

    def recent_hits(self, obj):
        """Requests still stored for this address."""
        return obj.hits.count()
    recent_hits.short_description = 'Hits'

    def has_add_permission(self, request):
        """Disable manual creation."""
        return False
