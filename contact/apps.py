"""
Contact App

Backend for the Zyph Technologies website contact form:
- Public contact form submission with rate limiting
- Admin alert and submitter confirmation emails
- Token-protected statistics and listing for the admin dashboard
"""
import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class ContactConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'contact'
    verbose_name = 'Contact Submissions'

    services = None

    def ready(self):
        """Register system checks and build the contact components once."""
        from . import checks  # noqa
        from .services import build_services

        self.services = build_services()
        logger.info(
            "Contact service ready (database %s, email %s, admin API %s)",
            'configured' if checks.database_configured() else 'SQLite fallback',
            'configured' if checks.email_configured() else 'NOT configured',
            'enabled' if self.services.settings.admin_token else 'disabled',
        )
