"""
Email backends that misbehave on purpose, for notification tests.

Configured with override_settings(EMAIL_BACKEND=...); behavior is
tuned through class attributes (reset them with monkeypatch).
"""
import threading
import time
from smtplib import SMTPException

from django.core import mail
from django.core.mail.backends.base import BaseEmailBackend


class FailingEmailBackend(BaseEmailBackend):
    """
    Raises for messages addressed to failing_recipients (all when None).

    Other messages are delivered after delay seconds.
    """

    failing_recipients = None
    delay = 0

    def send_messages(self, email_messages):
        sent = 0
        for message in email_messages:
            recipients = set(message.to)
            if self.failing_recipients is None or recipients & set(self.failing_recipients):
                raise SMTPException(f"550 mailbox unavailable: {', '.join(message.to)}")
            time.sleep(self.delay)
            mail.outbox.append(message)
            sent += 1
        return sent


class RendezvousEmailBackend(BaseEmailBackend):
    """
    Each send waits until the other one has started.

    Sequential sends break the barrier and fail.
    """

    barrier = None

    def send_messages(self, email_messages):
        self.barrier.wait()
        mail.outbox.extend(email_messages)
        return len(email_messages)


class HangingEmailBackend(BaseEmailBackend):
    """Blocks until release is set."""

    release = threading.Event()

    def send_messages(self, email_messages):
        self.release.wait(timeout=5)
        return len(email_messages)
