"""
Admin Query Service

Read-only statistics and listing over stored submissions.
"""
import math

from .store import CountFilter, DEFAULT_PAGE_SIZE, parse_page_size, parse_positive_int


class AdminQueryService:
    """Aggregate counts and paginated listing for the admin dashboard."""

    def __init__(self, store):
        self.store = store

    def stats(self):
        total = self.store.count(CountFilter.ALL)
        new = self.store.count(CountFilter.NEW)
        last_week = self.store.count(CountFilter.LAST_7_DAYS)
        return {
            'total': total,
            'nuevos': new,
            'ultimaSemana': last_week,
            'procesados': total - new,
        }

    def contacts(self, page=1, limit=DEFAULT_PAGE_SIZE):
        """
        One page of submissions plus pagination metadata.

        Returns:
            (submissions, pagination) where pagination holds page, limit,
            total and pages.
        """
        page = parse_positive_int(page, 1)
        limit = parse_page_size(limit)
        submissions, total = self.store.list(page, limit)
        pagination = {
            'page': page,
            'limit': limit,
            'total': total,
            'pages': math.ceil(total / limit),
        }
        return submissions, pagination
