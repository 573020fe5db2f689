"""
Contact Views

Public contact form endpoint, health check and the token-protected
admin API.
"""
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .authentication import AdminTokenAuthentication
from .exceptions import SubmissionInvalid
from .permissions import HasAdminToken
from .rate_limiting import get_client_ip, rate_limit_contact_form
from .serializers import (
    ContactFormSubmitSerializer,
    ContactStatsSerializer,
    ContactSubmissionListSerializer,
)
from .services import get_services
from .validators import RULE_FORMAT


SUBMISSION_RECEIVED = 'Mensaje enviado correctamente. Te contactaremos pronto.'


class ContactServicesMixin:
    """
    Gives views access to the contact components.

    Each attribute can be injected through as_view(), otherwise the
    instances built at startup are used.
    """

    services = None

    def get_services(self):
        return self.services or get_services()

    def get_contact_settings(self):
        return self.get_services().settings

    def get_rate_limiter(self):
        return self.get_services().rate_limiter

    def get_client_address(self, request):
        contact_settings = self.get_contact_settings()
        return get_client_ip(
            request,
            trust_proxy=contact_settings.trust_proxy,
            proxy_hops=contact_settings.proxy_hops,
        )


class HealthView(ContactServicesMixin, APIView):
    """
    GET /api/health
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request):
        return Response({
            'status': 'OK',
            'timestamp': timezone.now().isoformat().replace('+00:00', 'Z'),
            'service': self.get_contact_settings().service_name,
        })


class ContactFormSubmitView(ContactServicesMixin, APIView):
    """
    Public endpoint for contact form submissions.

    POST /api/contact

    No authentication required. Rate limited per client address.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    @rate_limit_contact_form
    def post(self, request):
        """Submit a contact form."""
        serializer = ContactFormSubmitSerializer(data=request.data)
        if not serializer.is_valid():
            raise SubmissionInvalid(*RULE_FORMAT)

        submission = self.get_services().pipeline.submit(
            serializer.validated_data,
            source_address=self.get_client_address(request),
        )

        return Response(
            {
                'success': True,
                'message': SUBMISSION_RECEIVED,
                'contactId': str(submission.id),
            },
            status=status.HTTP_201_CREATED
        )

    def finalize_response(self, request, response, *args, **kwargs):
        response = super().finalize_response(request, response, *args, **kwargs)
        decision = getattr(request, 'rate_limit', None)
        if decision is not None:
            for header, value in decision.headers().items():
                response[header] = value
        return response


class AdminAPIView(ContactServicesMixin, APIView):
    """Base for admin endpoints: bearer token, plain {'error'} bodies."""

    authentication_classes = [AdminTokenAuthentication]
    permission_classes = [HasAdminToken]
    plain_errors = True


class ContactStatsView(AdminAPIView):
    """
    Get contact submission statistics.

    GET /api/admin/stats
    """

    def get(self, request):
        stats = self.get_services().admin_queries.stats()
        return Response(ContactStatsSerializer(stats).data)


class ContactListView(AdminAPIView):
    """
    List contact submissions, newest first.

    GET /api/admin/contacts

    Query Parameters:
    - page: Page number (default: 1)
    - limit: Items per page (default: 10)
    """

    def get(self, request):
        submissions, pagination = self.get_services().admin_queries.contacts(
            page=request.query_params.get('page'),
            limit=request.query_params.get('limit'),
        )
        return Response({
            'contacts': ContactSubmissionListSerializer(submissions, many=True).data,
            'pagination': pagination,
        })
