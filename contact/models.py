"""
Contact Models

Database schema for contact form submissions and the rate limiter's
rolling-window bookkeeping.
"""
import uuid
from django.db import models
from django.utils import timezone


class ContactSubmission(models.Model):
    """
    A contact form entry from a prospective client.

    Created once by the submission pipeline and never updated or deleted
    by this service. Status changes belong to back-office tooling.
    """

    STATUS_NEW = 'new'
    STATUS_CONTACTED = 'contacted'
    STATUS_CLOSED = 'closed'

    STATUS_CHOICES = [
        (STATUS_NEW, 'New'),
        (STATUS_CONTACTED, 'Contacted'),
        (STATUS_CLOSED, 'Closed'),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    # Contact Information
    name = models.CharField(
        max_length=50,
        help_text="Name of the person contacting us (2-50 characters)"
    )

    company = models.TextField(
        help_text="Company the person represents"
    )

    email = models.TextField(
        help_text="Email address for follow-up"
    )

    phone = models.TextField(
        help_text="Phone number as typed by the submitter"
    )

    message = models.TextField(
        help_text="The message content (10-1000 characters)"
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_NEW,
        db_index=True,
        help_text="Follow-up status of the submission"
    )

    # Audit only, never returned by the public or listing APIs
    ip_address = models.GenericIPAddressField(
        null=True,
        blank=True,
        help_text="IP address of the submitter"
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When the submission was received"
    )

    class Meta:
        db_table = 'contact_submissions'
        ordering = ['-created_at']
        verbose_name = 'Contact Submission'
        verbose_name_plural = 'Contact Submissions'
        indexes = [
            models.Index(fields=['status', 'created_at'], name='contact_sub_status_created_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(status__in=['new', 'contacted', 'closed']),
                name='contact_submission_status_valid',
            ),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}> ({self.status})"


class ContactFormRateLimit(models.Model):
    """
    Per-address rate limit bucket.

    The row is locked while a request is being admitted so concurrent
    submissions from one address are counted one at a time.
    """

    identifier = models.CharField(
        max_length=255,
        unique=True,
        help_text="Client IP address"
    )

    created_at = models.DateTimeField(
        auto_now_add=True
    )

    class Meta:
        db_table = 'contact_form_rate_limits'
        verbose_name = 'Contact Form Rate Limit'
        verbose_name_plural = 'Contact Form Rate Limits'

    def __str__(self):
        return self.identifier


class ContactFormRateLimitHit(models.Model):
    """One admitted request inside a bucket's rolling window."""

    bucket = models.ForeignKey(
        ContactFormRateLimit,
        on_delete=models.CASCADE,
        related_name='hits'
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True
    )

    class Meta:
        db_table = 'contact_form_rate_limit_hits'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['bucket', 'created_at'], name='contact_hit_bucket_created_idx'),
        ]

    def __str__(self):
        return f"{self.bucket.identifier} @ {self.created_at.isoformat()}"
