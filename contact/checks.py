"""
Contact System Checks

Missing external configuration shows up in `manage.py check` and at
server start instead of failing silently at the first submission.
"""
from django.conf import settings
from django.core.checks import Tags, Warning, register


def database_configured():
    return bool(getattr(settings, 'DATABASE_CONFIGURED', False))


def email_configured():
    backend = getattr(settings, 'EMAIL_BACKEND', '')
    if not backend.endswith('smtp.EmailBackend'):
        # console, locmem and file backends need no credentials
        return True
    return bool(settings.EMAIL_HOST_USER and settings.EMAIL_HOST_PASSWORD)


@register()
def check_database_configuration(app_configs, **kwargs):
    if database_configured():
        return []
    return [
        Warning(
            'No database configured; contact submissions go to the local SQLite file.',
            hint='Set DB_ENGINE=postgresql and the DB_* variables in the environment.',
            id='contact.W001',
        )
    ]


@register()
def check_email_configuration(app_configs, **kwargs):
    if email_configured():
        return []
    return [
        Warning(
            'SMTP email backend selected but EMAIL_HOST_USER/EMAIL_HOST_PASSWORD are not set; '
            'contact notifications will fail.',
            hint='Set EMAIL_HOST_USER and EMAIL_HOST_PASSWORD in the environment.',
            id='contact.W002',
        )
    ]


@register(Tags.security)
def check_admin_token(app_configs, **kwargs):
    if getattr(settings, 'ADMIN_TOKEN', ''):
        return []
    return [
        Warning(
            'ADMIN_TOKEN is not set; every admin API request will be rejected.',
            hint='Set ADMIN_TOKEN in the environment.',
            id='contact.W003',
        )
    ]
