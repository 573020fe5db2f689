"""
Tests for the rolling-window rate limiter.
"""
from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.test import RequestFactory
from django.utils import timezone

from contact.models import ContactFormRateLimit, ContactFormRateLimitHit
from contact.rate_limiting import RateLimitDecision, SubmissionRateLimiter, get_client_ip


IP = '198.51.100.7'


def seed_hits(identifier, *ages):
    """Store admitted requests that happened `age` ago."""
    bucket, _ = ContactFormRateLimit.objects.get_or_create(identifier=identifier)
    now = timezone.now()
    for age in ages:
        ContactFormRateLimitHit.objects.create(bucket=bucket, created_at=now - age)
    return bucket


@pytest.mark.django_db
class TestSubmissionRateLimiter:

    def test_allows_up_to_limit_then_rejects(self):
        limiter = SubmissionRateLimiter(max_requests=5, window=timedelta(minutes=15))

        decisions = [limiter.hit(IP) for _ in range(6)]

        assert [d.allowed for d in decisions] == [True] * 5 + [False]
        assert [d.remaining for d in decisions] == [4, 3, 2, 1, 0, 0]

    def test_rejected_request_is_not_counted(self):
        limiter = SubmissionRateLimiter(max_requests=2)
        for _ in range(4):
            limiter.hit(IP)

        assert ContactFormRateLimitHit.objects.filter(bucket__identifier=IP).count() == 2

    def test_addresses_are_counted_separately(self):
        limiter = SubmissionRateLimiter(max_requests=1)

        assert limiter.hit(IP).allowed
        assert not limiter.hit(IP).allowed
        assert limiter.hit('198.51.100.8').allowed

    def test_hits_older_than_window_do_not_count(self):
        seed_hits(IP, *[timedelta(minutes=16)] * 5)
        limiter = SubmissionRateLimiter(max_requests=5, window=timedelta(minutes=15))

        decision = limiter.hit(IP)

        assert decision.allowed
        assert decision.remaining == 4
        # expired hits are pruned
        assert ContactFormRateLimitHit.objects.filter(bucket__identifier=IP).count() == 1

    def test_window_is_rolling(self):
        """The quota frees up when the oldest hit leaves the window, not at a fixed reset."""
        seed_hits(IP, timedelta(minutes=14), *[timedelta(minutes=5)] * 4)
        limiter = SubmissionRateLimiter(max_requests=5, window=timedelta(minutes=15))

        decision = limiter.hit(IP)

        assert not decision.allowed
        assert 55 <= decision.reset_after <= 60

        ContactFormRateLimitHit.objects.filter(
            created_at__lt=timezone.now() - timedelta(minutes=10)
        ).update(created_at=timezone.now() - timedelta(minutes=15, seconds=1))

        assert limiter.hit(IP).allowed

    def test_missing_identifier_shares_one_bucket(self):
        limiter = SubmissionRateLimiter(max_requests=1)

        assert limiter.hit(None).allowed
        assert not limiter.hit('').allowed


@pytest.mark.django_db
class TestPrune:

    def age_buckets(self, delta):
        ContactFormRateLimit.objects.update(created_at=timezone.now() - delta)

    def test_removes_expired_hits_and_empty_buckets(self):
        seed_hits('198.51.100.1', timedelta(minutes=20), timedelta(minutes=30))
        seed_hits('198.51.100.2', timedelta(minutes=20), timedelta(minutes=1))
        self.age_buckets(timedelta(hours=1))

        hits, buckets = SubmissionRateLimiter(window=timedelta(minutes=15)).prune()

        assert (hits, buckets) == (3, 1)
        assert list(ContactFormRateLimit.objects.values_list('identifier', flat=True)) == [
            '198.51.100.2'
        ]
        assert ContactFormRateLimitHit.objects.count() == 1

    def test_keeps_bucket_created_inside_window(self):
        ContactFormRateLimit.objects.create(identifier=IP)

        assert SubmissionRateLimiter().prune() == (0, 0)
        assert ContactFormRateLimit.objects.filter(identifier=IP).exists()

    def test_management_command(self):
        seed_hits(IP, timedelta(hours=2))
        self.age_buckets(timedelta(hours=2))
        out = StringIO()

        call_command('prune_contact_rate_limits', stdout=out)

        assert 'Pruned 1 expired hit(s) and 1 empty bucket(s)' in out.getvalue()
        assert not ContactFormRateLimit.objects.exists()


class TestRateLimitDecision:

    def test_allowed_headers(self):
        headers = RateLimitDecision(allowed=True, limit=5, remaining=3, reset_after=900).headers()

        assert headers == {
            'RateLimit-Limit': '5',
            'RateLimit-Remaining': '3',
            'RateLimit-Reset': '900',
        }

    def test_rejected_headers_include_retry_after(self):
        headers = RateLimitDecision(allowed=False, limit=5, remaining=0, reset_after=120).headers()

        assert headers['Retry-After'] == '120'
        assert headers['RateLimit-Remaining'] == '0'


class TestGetClientIp:

    def setup_method(self):
        self.factory = RequestFactory()

    def test_uses_hop_appended_by_proxy(self):
        request = self.factory.post(
            '/api/contact',
            HTTP_X_FORWARDED_FOR='198.51.100.66, 203.0.113.5',
            REMOTE_ADDR='10.0.0.1',
        )
        assert get_client_ip(request) == '203.0.113.5'

    def test_counts_hops_from_the_right(self):
        request = self.factory.post(
            '/api/contact',
            HTTP_X_FORWARDED_FOR='198.51.100.66, 203.0.113.5, 10.0.0.3',
            REMOTE_ADDR='10.0.0.1',
        )
        assert get_client_ip(request, proxy_hops=2) == '203.0.113.5'

    def test_short_header_uses_leftmost_entry(self):
        request = self.factory.post(
            '/api/contact', HTTP_X_FORWARDED_FOR='203.0.113.5', REMOTE_ADDR='10.0.0.1'
        )
        assert get_client_ip(request, proxy_hops=3) == '203.0.113.5'

    def test_ignores_forwarded_header_without_proxy_trust(self):
        request = self.factory.post(
            '/api/contact', HTTP_X_FORWARDED_FOR='203.0.113.5', REMOTE_ADDR='10.0.0.1'
        )
        assert get_client_ip(request, trust_proxy=False) == '10.0.0.1'

    def test_garbage_forwarded_header_falls_back_to_remote_addr(self):
        request = self.factory.post(
            '/api/contact', HTTP_X_FORWARDED_FOR='not-an-ip', REMOTE_ADDR='10.0.0.1'
        )
        assert get_client_ip(request) == '10.0.0.1'

    def test_missing_address_is_none(self):
        request = self.factory.post('/api/contact', REMOTE_ADDR='')
        assert get_client_ip(request) is None
