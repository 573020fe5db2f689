"""
Exception handler for Django REST Framework.

Every error leaves the API as JSON:
- public endpoints: {'success': False, 'error': <message>}
- admin endpoints (views with plain_errors = True): {'error': <message>}

Unexpected exceptions are logged with their traceback and answered with
a generic 500; their text never reaches the client.
"""
import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound
from rest_framework.exceptions import PermissionDenied as PermissionDeniedError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from contact.exceptions import GENERIC_SERVER_ERROR

logger = logging.getLogger(__name__)


def error_body(message, plain=False):
    if plain:
        return {'error': message}
    return {'success': False, 'error': message}


def _message(exc):
    detail = exc.detail
    if isinstance(detail, (list, tuple)) and detail:
        detail = detail[0]
    if isinstance(detail, dict) and detail:
        detail = next(iter(detail.values()))
        if isinstance(detail, (list, tuple)) and detail:
            detail = detail[0]
    return str(detail)


def api_exception_handler(exc, context):
    """
    DRF EXCEPTION_HANDLER.

    Args:
        exc: The exception instance
        context: The context dictionary (holds the view)

    Returns:
        Response with the error body; never None.
    """
    view = context.get('view')
    plain = getattr(view, 'plain_errors', False)

    if isinstance(exc, Http404):
        exc = NotFound('Ruta no encontrada')
    elif isinstance(exc, PermissionDenied):
        exc = PermissionDeniedError('Acceso denegado')

    if isinstance(exc, APIException):
        response = exception_handler(exc, context)
        if response.status_code >= 500:
            logger.error(
                "%s in %s: %s", exc.__class__.__name__,
                view.__class__.__name__ if view else 'unknown view',
                getattr(exc, 'cause', None) or exc,
            )
            message = GENERIC_SERVER_ERROR
        else:
            message = _message(exc)
        response.data = error_body(message, plain)
        return response

    logger.exception(
        "Unhandled error in %s", view.__class__.__name__ if view else 'unknown view'
    )
    return Response(
        error_body(GENERIC_SERVER_ERROR, plain),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )
