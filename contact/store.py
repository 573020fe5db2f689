"""
Submission Store

Persistence and read queries for contact submissions. Database errors
are converted to StorageUnavailable so callers deal with a single
failure kind.
"""
import logging
from datetime import timedelta
from enum import Enum

from django.db import DatabaseError
from django.utils import timezone

from .exceptions import StorageUnavailable
from .models import ContactSubmission

logger = logging.getLogger(__name__)


DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class CountFilter(Enum):
    ALL = 'all'
    NEW = 'new'
    LAST_7_DAYS = 'last_7_days'


def parse_positive_int(value, default):
    """Parse a query parameter, falling back to default when not a positive int."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def parse_page_size(value):
    """Parse a page size, capped at MAX_PAGE_SIZE."""
    return min(parse_positive_int(value, DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE)


class SubmissionStore:
    """Durable storage for ContactSubmission records."""

    model = ContactSubmission

    def create(self, fields, source_address):
        """
        Persist a new submission with status 'new'.

        Args:
            fields: dict with name, company, email, phone and message
            source_address: client IP address, kept for audit

        Raises:
            StorageUnavailable: the database could not be reached or
                rejected the write.
        """
        try:
            return self.model.objects.create(
                name=fields['name'],
                company=fields['company'],
                email=fields['email'],
                phone=fields['phone'],
                message=fields['message'],
                status=ContactSubmission.STATUS_NEW,
                ip_address=source_address,
            )
        except DatabaseError as exc:
            logger.error("Could not store contact submission: %s", exc)
            raise StorageUnavailable(cause=exc) from exc

    def get(self, contact_id):
        try:
            return self.model.objects.filter(id=contact_id).first()
        except DatabaseError as exc:
            raise StorageUnavailable(cause=exc) from exc

    def count(self, count_filter=CountFilter.ALL):
        queryset = self.model.objects.all()
        if count_filter is CountFilter.NEW:
            queryset = queryset.filter(status=ContactSubmission.STATUS_NEW)
        elif count_filter is CountFilter.LAST_7_DAYS:
            queryset = queryset.filter(created_at__gte=timezone.now() - timedelta(days=7))

        try:
            return queryset.count()
        except DatabaseError as exc:
            raise StorageUnavailable(cause=exc) from exc

    def list(self, page=1, page_size=DEFAULT_PAGE_SIZE):
        """
        Return one page of submissions, newest first, and the total count.

        Pages are 1-indexed. A page past the end is an empty list. The
        source address is not loaded for listed rows. Page sizes above
        MAX_PAGE_SIZE are capped.
        """
        page = parse_positive_int(page, 1)
        page_size = parse_page_size(page_size)
        offset = (page - 1) * page_size

        queryset = self.model.objects.defer('ip_address').order_by('-created_at')
        try:
            total = queryset.count()
            if offset >= total:
                return [], total
            items = list(queryset[offset:offset + page_size])
        except DatabaseError as exc:
            raise StorageUnavailable(cause=exc) from exc
        return items, total
