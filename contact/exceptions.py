"""
Contact Exceptions

Error taxonomy for the contact submission pipeline and the admin API.

Every exception here is a DRF APIException so views can simply let it
propagate; core.exceptions.api_exception_handler renders the body.
Server-side failures always carry the generic client message; the
underlying cause stays on the exception for logging only.
"""
from rest_framework import status
from rest_framework.exceptions import APIException, AuthenticationFailed


GENERIC_SERVER_ERROR = 'Error interno del servidor. Intenta nuevamente más tarde.'


class ContactError(APIException):
    """Base class for errors answered with {'success': False, 'error': ...}."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = GENERIC_SERVER_ERROR
    default_code = 'server_error'


class SubmissionInvalid(ContactError):
    """A submitted field broke a validation rule (first rule only)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Datos de contacto inválidos'
    default_code = 'invalid'

    def __init__(self, rule, message):
        super().__init__(detail=message, code=rule)
        self.rule = rule
        self.message = message


class RateLimited(ContactError):
    """The client address used up its submission quota."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_detail = 'Demasiados intentos de contacto. Intenta nuevamente en 15 minutos.'
    default_code = 'rate_limited'

    def __init__(self, decision, detail=None):
        super().__init__(detail=detail)
        self.decision = decision


class StorageUnavailable(ContactError):
    """The submission store could not be reached or the write failed."""

    default_code = 'storage_unavailable'

    def __init__(self, cause=None):
        super().__init__()
        self.cause = cause


class NotificationFailed(ContactError):
    """
    At least one of the two notification emails could not be sent.

    The submission it belongs to is already stored when this is raised;
    contact_id identifies it in the logs.
    """

    default_code = 'notification_failed'

    def __init__(self, cause=None, contact_id=None):
        super().__init__()
        self.cause = cause
        self.contact_id = contact_id


class AdminUnauthorized(AuthenticationFailed):
    """Missing or incorrect admin bearer token."""

    default_detail = 'No autorizado'
    default_code = 'unauthorized'
