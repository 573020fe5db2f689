"""
Contact Submission Pipeline

Runs one contact form submission through validation, storage and
notification:

    received -> validated -> stored -> notified -> responded

Failure policy:
- a validation failure never reaches the store or the dispatcher
- a storage failure never attempts notification
- a notification failure never undoes storage; the submission stays
  stored and the caller still gets a server error
"""
import logging
from enum import Enum

from .exceptions import NotificationFailed, StorageUnavailable, SubmissionInvalid
from .validators import validate_submission

logger = logging.getLogger(__name__)


class PipelineStage(Enum):
    RECEIVED = 'received'
    VALIDATED = 'validated'
    STORED = 'stored'
    NOTIFIED = 'notified'


class ContactSubmissionPipeline:
    """Orchestrates validator, store and dispatcher for one request."""

    def __init__(self, store, dispatcher):
        self.store = store
        self.dispatcher = dispatcher

    def submit(self, fields, source_address=None):
        """
        Process a contact form submission.

        Args:
            fields: dict with name, company, email, phone and message
            source_address: client IP address

        Returns:
            The stored ContactSubmission.

        Raises:
            SubmissionInvalid: first violated field rule; nothing stored.
            StorageUnavailable: the submission could not be stored; no
                email was sent.
            NotificationFailed: the submission is stored but at least one
                email failed.
        """
        try:
            validate_submission(
                fields.get('name'),
                fields.get('company'),
                fields.get('email'),
                fields.get('phone'),
                fields.get('message'),
            )
        except SubmissionInvalid as exc:
            logger.info("Contact submission rejected (%s) from %s", exc.rule, source_address)
            raise
        stage = PipelineStage.VALIDATED

        try:
            submission = self.store.create(fields, source_address)
        except StorageUnavailable as exc:
            logger.error(
                "Contact submission failed at %s -> store: %s",
                stage.value, exc.cause,
            )
            raise
        stage = PipelineStage.STORED
        logger.info("Contact submission %s stored", submission.id)

        try:
            self.dispatcher.dispatch(submission)
        except NotificationFailed as exc:
            exc.contact_id = submission.id
            # Keep the stored lead; only the response reports the failure
            logger.error(
                "Contact submission %s stored but notification failed: %s",
                submission.id, exc.cause,
            )
            raise
        stage = PipelineStage.NOTIFIED
        logger.info("Contact submission %s %s", submission.id, stage.value)

        return submission
