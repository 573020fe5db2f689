"""
Rate Limiting for the Contact Form

Rolling-window request quota per client address. Every request that
gets past the gate counts, whatever its outcome.
"""
import ipaddress
import math
from dataclasses import dataclass
from datetime import timedelta
from functools import wraps

from django.db import transaction
from django.utils import timezone

from .exceptions import RateLimited
from .models import ContactFormRateLimit, ContactFormRateLimitHit


def _valid_ip(value):
    try:
        return str(ipaddress.ip_address(value.strip()))
    except (AttributeError, ValueError):
        return None


def get_client_ip(request, trust_proxy=True, proxy_hops=1):
    """
    Get client IP address from request.

    Each trusted proxy appends the address it received the request from,
    so the client is proxy_hops entries from the right of X-Forwarded-For.
    Entries to the left of it are written by the client and ignored.
    """
    if trust_proxy:
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            hops = x_forwarded_for.split(',')
            ip = _valid_ip(hops[max(len(hops) - proxy_hops, 0)])
            if ip:
                return ip
    return _valid_ip(request.META.get('REMOTE_ADDR', ''))


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_after: int  # seconds until the oldest counted request leaves the window

    def headers(self):
        """IETF RateLimit headers, plus Retry-After when rejected."""
        headers = {
            'RateLimit-Limit': str(self.limit),
            'RateLimit-Remaining': str(self.remaining),
            'RateLimit-Reset': str(self.reset_after),
        }
        if not self.allowed:
            headers['Retry-After'] = str(self.reset_after)
        return headers


class SubmissionRateLimiter:
    """
    At most max_requests admitted requests per identifier per window.

    The identifier's bucket row is locked while counting so two
    concurrent requests cannot both take the last slot.
    """

    def __init__(self, max_requests=5, window=timedelta(minutes=15)):
        self.max_requests = max_requests
        self.window = window

    def _seconds_until(self, moment, now):
        return max(0, math.ceil((moment - now).total_seconds()))

    def hit(self, identifier):
        """
        Count one request for identifier.

        Returns:
            RateLimitDecision; when allowed is False the request was not
            counted.
        """
        identifier = identifier or 'unknown'
        now = timezone.now()
        window_start = now - self.window

        with transaction.atomic():
            bucket, _ = ContactFormRateLimit.objects.select_for_update().get_or_create(
                identifier=identifier
            )
            bucket.hits.filter(created_at__lte=window_start).delete()
            recent = list(
                bucket.hits.order_by('created_at').values_list('created_at', flat=True)
            )

            if len(recent) >= self.max_requests:
                return RateLimitDecision(
                    allowed=False,
                    limit=self.max_requests,
                    remaining=0,
                    reset_after=self._seconds_until(recent[0] + self.window, now),
                )

            bucket.hits.create(created_at=now)

        oldest = recent[0] if recent else now
        return RateLimitDecision(
            allowed=True,
            limit=self.max_requests,
            remaining=self.max_requests - len(recent) - 1,
            reset_after=self._seconds_until(oldest + self.window, now),
        )

    def prune(self):
        """
        Delete hits outside the window and buckets left without any.

        Returns:
            (hits_deleted, buckets_deleted)
        """
        window_start = timezone.now() - self.window

        with transaction.atomic():
            hits_deleted, _ = ContactFormRateLimitHit.objects.filter(
                created_at__lte=window_start
            ).delete()
            stale = list(
                ContactFormRateLimit.objects.select_for_update(of=('self',))
                .filter(created_at__lte=window_start, hits__isnull=True)
                .values_list('pk', flat=True)
            )
            # a bucket locked by hit() may have gained a hit meanwhile
            buckets_deleted, _ = ContactFormRateLimit.objects.filter(
                pk__in=stale, hits__isnull=True
            ).delete()

        return hits_deleted, buckets_deleted


def rate_limit_contact_form(view_func):
    """
    Decorator for rate limiting contact form submissions.

    Expects the view to provide get_rate_limiter() and get_client_address().
    The decision is kept on the request so the view can add the
    RateLimit headers to whatever response it produces.
    """
    @wraps(view_func)
    def wrapped_view(self, request, *args, **kwargs):
        ip = self.get_client_address(request)
        decision = self.get_rate_limiter().hit(ip)
        request.rate_limit = decision

        if not decision.allowed:
            raise RateLimited(decision)

        return view_func(self, request, *args, **kwargs)

    return wrapped_view
