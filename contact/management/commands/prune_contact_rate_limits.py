"""
Django Management Command: Prune Contact Rate Limits

Deletes rate limit hits that left the rolling window and the address
buckets that no longer hold any. Run it periodically (cron).

Usage:
    python manage.py prune_contact_rate_limits
"""
from django.core.management.base import BaseCommand

from contact.services import get_services


class Command(BaseCommand):
    help = 'Delete expired contact form rate limit records'

    def handle(self, *args, **options):
        hits, buckets = get_services().rate_limiter.prune()
        self.stdout.write(self.style.SUCCESS(
            f'Pruned {hits} expired hit(s) and {buckets} empty bucket(s)'
        ))
