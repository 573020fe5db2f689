"""
Tests for the notification dispatcher.
"""
import threading
import time
from dataclasses import replace

import pytest
from django.utils import timezone

from contact.conf import ContactSettings
from contact.exceptions import NotificationFailed
from contact.models import ContactSubmission
from contact.notifications import NotificationDispatcher
from tests import email_backends


@pytest.fixture
def contact_settings():
    return ContactSettings.from_django_settings()


@pytest.fixture
def dispatcher(contact_settings):
    return NotificationDispatcher(contact_settings)


@pytest.fixture
def submission():
    return ContactSubmission(
        name='Carlos Benítez',
        company='Logística Central',
        email='carlos@logcentral.com.py',
        phone='+595981555111',
        message='Queremos integrar nuestro ERP con el sitio web.',
        ip_address='203.0.113.44',
        created_at=timezone.now(),
    )


def by_recipient(outbox):
    return {message.to[0]: message for message in outbox}


class TestMessages:

    def test_admin_message_goes_to_team_inbox(self, dispatcher, submission):
        message = dispatcher.build_admin_message(submission)

        assert message.to == ['ventas@zyph.tech']
        assert message.from_email == 'web@zyph.tech'
        assert message.reply_to == ['carlos@logcentral.com.py']
        assert message.subject == 'Nuevo contacto: Carlos Benítez - Logística Central'

    def test_admin_message_lists_every_field(self, dispatcher, submission):
        body = dispatcher.build_admin_message(submission).body

        for value in ('Carlos Benítez', 'Logística Central', 'carlos@logcentral.com.py',
                      '+595981555111', 'integrar nuestro ERP', '203.0.113.44', str(submission.id)):
            assert value in body

    def test_admin_message_falls_back_to_sender(self, contact_settings, submission):
        dispatcher = NotificationDispatcher(replace(contact_settings, admin_email='web@zyph.tech'))

        assert dispatcher.build_admin_message(submission).to == ['web@zyph.tech']

    def test_admin_inbox_defaults_to_sender_setting(self, settings):
        settings.CONTACT_EMAIL_TO = ''

        assert ContactSettings.from_django_settings().admin_email == settings.DEFAULT_FROM_EMAIL

    def test_confirmation_goes_to_submitter(self, dispatcher, submission):
        message = dispatcher.build_confirmation_message(submission)

        assert message.to == ['carlos@logcentral.com.py']
        assert 'Hola Carlos Benítez' in message.body
        assert 'Logística Central' in message.body

    def test_both_messages_have_html_alternative(self, dispatcher, submission):
        for message in (dispatcher.build_admin_message(submission),
                        dispatcher.build_confirmation_message(submission)):
            html, mimetype = message.alternatives[0]
            assert mimetype == 'text/html'
            assert 'Carlos Benítez' in html


class TestDispatch:

    def test_sends_both_messages(self, dispatcher, submission, mailoutbox):
        dispatcher.dispatch(submission)

        assert set(by_recipient(mailoutbox)) == {'ventas@zyph.tech', 'carlos@logcentral.com.py'}

    def test_sends_run_concurrently(self, dispatcher, submission, mailoutbox, settings, monkeypatch):
        """Each send blocks until the other has started; sequential sends would time out."""
        settings.EMAIL_BACKEND = 'tests.email_backends.RendezvousEmailBackend'
        monkeypatch.setattr(
            email_backends.RendezvousEmailBackend, 'barrier', threading.Barrier(2, timeout=2)
        )

        dispatcher.dispatch(submission)

        assert len(mailoutbox) == 2

    def test_one_failed_send_fails_dispatch(self, dispatcher, submission, mailoutbox,
                                            settings, monkeypatch):
        settings.EMAIL_BACKEND = 'tests.email_backends.FailingEmailBackend'
        monkeypatch.setattr(
            email_backends.FailingEmailBackend, 'failing_recipients', ['carlos@logcentral.com.py']
        )

        with pytest.raises(NotificationFailed) as excinfo:
            dispatcher.dispatch(submission)

        assert excinfo.value.contact_id == submission.id
        assert excinfo.value.status_code == 500
        assert 'mailbox unavailable' in str(excinfo.value.cause)

    def test_failure_waits_for_the_other_send(self, dispatcher, submission, mailoutbox,
                                              settings, monkeypatch):
        settings.EMAIL_BACKEND = 'tests.email_backends.FailingEmailBackend'
        monkeypatch.setattr(
            email_backends.FailingEmailBackend, 'failing_recipients', ['carlos@logcentral.com.py']
        )
        monkeypatch.setattr(email_backends.FailingEmailBackend, 'delay', 0.3)

        with pytest.raises(NotificationFailed):
            dispatcher.dispatch(submission)

        assert [message.to for message in mailoutbox] == [['ventas@zyph.tech']]

    def test_both_failed_sends_fail_dispatch(self, dispatcher, submission, mailoutbox, settings):
        settings.EMAIL_BACKEND = 'tests.email_backends.FailingEmailBackend'

        with pytest.raises(NotificationFailed):
            dispatcher.dispatch(submission)

        assert mailoutbox == []

    def test_slow_sends_time_out(self, contact_settings, submission, settings, monkeypatch):
        settings.EMAIL_BACKEND = 'tests.email_backends.HangingEmailBackend'
        release = threading.Event()
        monkeypatch.setattr(email_backends.HangingEmailBackend, 'release', release)
        dispatcher = NotificationDispatcher(replace(contact_settings, notification_timeout=0.2))

        started = time.monotonic()
        try:
            with pytest.raises(NotificationFailed) as excinfo:
                dispatcher.dispatch(submission)
        finally:
            release.set()

        assert time.monotonic() - started < 2
        assert 'still running' in str(excinfo.value.cause)
