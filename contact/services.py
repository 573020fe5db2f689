"""
Contact Services

Builds the contact components once, from a single ContactSettings, and
wires them together. ContactConfig.ready() stores the result on the app
config; views read it from there unless a test injects its own.
"""
from dataclasses import dataclass

from .admin_queries import AdminQueryService
from .conf import ContactSettings
from .notifications import NotificationDispatcher
from .pipeline import ContactSubmissionPipeline
from .rate_limiting import SubmissionRateLimiter
from .store import SubmissionStore


@dataclass
class ContactServices:
    settings: ContactSettings
    store: SubmissionStore
    dispatcher: NotificationDispatcher
    rate_limiter: SubmissionRateLimiter
    pipeline: ContactSubmissionPipeline
    admin_queries: AdminQueryService


def build_services(contact_settings=None, store=None, dispatcher=None):
    contact_settings = contact_settings or ContactSettings.from_django_settings()
    store = store or SubmissionStore()
    dispatcher = dispatcher or NotificationDispatcher(contact_settings)
    return ContactServices(
        settings=contact_settings,
        store=store,
        dispatcher=dispatcher,
        rate_limiter=SubmissionRateLimiter(
            max_requests=contact_settings.rate_limit_max,
            window=contact_settings.rate_limit_window,
        ),
        pipeline=ContactSubmissionPipeline(store, dispatcher),
        admin_queries=AdminQueryService(store),
    )


def get_services():
    from django.apps import apps
    return apps.get_app_config('contact').services
