"""
JSON error pages for requests that never reach a DRF view.
"""
import logging

from django.http import JsonResponse

from contact.exceptions import GENERIC_SERVER_ERROR

logger = logging.getLogger(__name__)


def not_found(request, exception=None):
    return JsonResponse(
        {'success': False, 'error': 'Ruta no encontrada'},
        status=404
    )


def server_error(request):
    logger.error("Unhandled server error for %s %s", request.method, request.path)
    return JsonResponse(
        {'success': False, 'error': GENERIC_SERVER_ERROR},
        status=500
    )
