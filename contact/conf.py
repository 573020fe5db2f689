"""
Contact Configuration

Everything the contact components need from the environment, read once
from Django settings and handed to each component explicitly.
"""
from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings


@dataclass(frozen=True)
class ContactSettings:
    service_name: str
    from_email: str
    admin_email: str
    admin_token: str
    rate_limit_max: int
    rate_limit_window: timedelta
    notification_timeout: float
    trust_proxy: bool
    proxy_hops: int = 1

    @classmethod
    def from_django_settings(cls):
        from_email = settings.DEFAULT_FROM_EMAIL
        return cls(
            service_name=getattr(settings, 'SERVICE_NAME', 'Zyph Technologies API'),
            from_email=from_email,
            # Admin notifications go to the sender mailbox when no inbox is set
            admin_email=getattr(settings, 'CONTACT_EMAIL_TO', '') or from_email,
            admin_token=getattr(settings, 'ADMIN_TOKEN', ''),
            rate_limit_max=int(getattr(settings, 'CONTACT_RATE_LIMIT_MAX', 5)),
            rate_limit_window=timedelta(
                minutes=int(getattr(settings, 'CONTACT_RATE_LIMIT_WINDOW_MINUTES', 15))
            ),
            notification_timeout=float(getattr(settings, 'CONTACT_NOTIFICATION_TIMEOUT', 30)),
            trust_proxy=bool(getattr(settings, 'TRUST_PROXY', True)),
            proxy_hops=max(1, int(getattr(settings, 'TRUST_PROXY_HOPS', 1))),
        )
