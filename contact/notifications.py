"""
Contact Notification Emails

Builds the two emails sent for every stored submission (an alert for the
team and a confirmation for the submitter) and sends them concurrently.
One attempt per submission; no queue, no retry.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, wait, ALL_COMPLETED
from concurrent.futures import TimeoutError as FuturesTimeoutError

from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import timezone

from .exceptions import NotificationFailed

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Compose and send the admin alert and submitter confirmation."""

    def __init__(self, contact_settings):
        self.from_email = contact_settings.from_email
        self.admin_email = contact_settings.admin_email
        self.timeout = contact_settings.notification_timeout
        self.service_name = contact_settings.service_name

    def _context(self, submission):
        received_at = timezone.localtime(submission.created_at or timezone.now())
        return {
            'submission': submission,
            'received_at': received_at.strftime('%Y-%m-%d %H:%M:%S %Z'),
            'service_name': self.service_name,
        }

    def build_admin_message(self, submission):
        """Alert for the team: every field plus timestamp and source address."""
        context = self._context(submission)
        subject = f"Nuevo contacto: {submission.name} - {submission.company}"

        text_content = f"""Nuevo mensaje de contacto recibido:

Nombre: {submission.name}
Empresa: {submission.company}
Email: {submission.email}
Teléfono: {submission.phone}
Recibido: {context['received_at']}
IP: {submission.ip_address or 'Desconocida'}
Referencia: {submission.id}

Mensaje:
{submission.message}
"""
        html_content = render_to_string('contact/emails/admin_notification.html', context)

        message = EmailMultiAlternatives(
            subject=subject,
            body=text_content,
            from_email=self.from_email,
            to=[self.admin_email],
            reply_to=[submission.email],
        )
        message.attach_alternative(html_content, 'text/html')
        return message

    def build_confirmation_message(self, submission):
        """Confirmation for the submitter recapping what they sent."""
        context = self._context(submission)
        subject = "Hemos recibido tu mensaje - Zyph Technologies"

        text_content = f"""Hola {submission.name},

Gracias por contactar a Zyph Technologies. Recibimos tu mensaje y
nuestro equipo te responderá a la brevedad.

Resumen de tu solicitud:
Empresa: {submission.company}
Email: {submission.email}
Teléfono: {submission.phone}
Mensaje:
{submission.message}

Saludos,
Equipo Zyph Technologies

---
Este es un mensaje automático, por favor no respondas a este correo.
"""
        html_content = render_to_string('contact/emails/confirmation.html', context)

        message = EmailMultiAlternatives(
            subject=subject,
            body=text_content,
            from_email=self.from_email,
            to=[submission.email],
        )
        message.attach_alternative(html_content, 'text/html')
        return message

    def dispatch(self, submission):
        """
        Send both notifications for a stored submission.

        Both sends start together; the call returns once both have
        finished, even when one of them already failed.

        Raises:
            NotificationFailed: either send raised, or they did not finish
                within the configured timeout.
        """
        messages = [
            self.build_admin_message(submission),
            self.build_confirmation_message(submission),
        ]

        executor = ThreadPoolExecutor(max_workers=len(messages), thread_name_prefix='contact-mail')
        try:
            futures = [
                executor.submit(message.send, fail_silently=False)
                for message in messages
            ]
            done, not_done = wait(futures, timeout=self.timeout, return_when=ALL_COMPLETED)

            for future in futures:
                if future in done and future.exception() is not None:
                    raise NotificationFailed(cause=future.exception(), contact_id=submission.id)

            if not_done:
                raise NotificationFailed(
                    cause=FuturesTimeoutError(f"email sends still running after {self.timeout}s"),
                    contact_id=submission.id,
                )
        finally:
            # Do not block the response on a stuck SMTP connection
            executor.shutdown(wait=False)

        logger.info(
            "Contact notifications sent for %s (admin: %s, submitter: %s)",
            submission.id, self.admin_email, submission.email,
        )
