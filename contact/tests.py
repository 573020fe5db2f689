"""
API Tests for the Contact Form and Admin Endpoints
"""
import uuid
from dataclasses import replace
from datetime import timedelta

import pytest
from django.db import OperationalError
from django.utils import timezone
from rest_framework import status

from contact.checks import check_admin_token, check_email_configuration
from contact.conf import ContactSettings
from contact.exceptions import StorageUnavailable
from contact.models import ContactSubmission, ContactFormRateLimitHit
from contact.store import SubmissionStore


GENERIC_ERROR = 'Error interno del servidor. Intenta nuevamente más tarde.'


class BrokenStore(SubmissionStore):
    """Store whose writes fail with the given exception."""

    def __init__(self, error):
        self.error = error

    def create(self, fields, source_address):
        raise self.error


def make_submissions(count, **fields):
    """Create submissions one minute apart, newest last."""
    now = timezone.now()
    created = []
    for i in range(count):
        submission = ContactSubmission.objects.create(
            name=fields.get('name', f'Cliente {i}'),
            company=fields.get('company', 'Empresa SA'),
            email=fields.get('email', f'cliente{i}@example.com'),
            phone=fields.get('phone', '595981123456'),
            message=fields.get('message', 'Mensaje de prueba para el listado.'),
            status=fields.get('status', ContactSubmission.STATUS_NEW),
            ip_address='198.51.100.1',
        )
        ContactSubmission.objects.filter(id=submission.id).update(
            created_at=now - timedelta(minutes=count - i)
        )
        created.append(submission)
    return created


@pytest.mark.django_db
class TestContactFormSubmission:
    """Test public contact form submission."""

    def test_submit_valid_contact_form(self, api_client, valid_payload, mailoutbox):
        """Test successful contact form submission."""
        response = api_client.post('/api/contact', valid_payload)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['success'] is True
        assert response.data['message'] == 'Mensaje enviado correctamente. Te contactaremos pronto.'

        submission = ContactSubmission.objects.get(id=response.data['contactId'])
        assert submission.name == 'María González'
        assert submission.company == 'Agro Paraguay SA'
        assert submission.phone == '+595 (21) 123-4567'
        assert submission.status == ContactSubmission.STATUS_NEW
        assert submission.ip_address == '203.0.113.10'

        assert sorted(message.to[0] for message in mailoutbox) == [
            'maria@agropy.com.py', 'ventas@zyph.tech'
        ]

    def test_trailing_slash_accepted(self, api_client, valid_payload):
        response = api_client.post('/api/contact/', valid_payload)
        assert response.status_code == status.HTTP_201_CREATED

    def test_accepted_content_types(self, api_client, valid_payload):
        response = api_client.post('/api/contact', valid_payload, format='multipart')
        # multipart is not an accepted content type
        assert response.status_code == status.HTTP_415_UNSUPPORTED_MEDIA_TYPE

        response = api_client.generic(
            'POST', '/api/contact',
            'nombre=Ana+Duarte&empresa=Coop&email=ana%40coop.org&telefono=595981222333'
            '&mensaje=Quisiera+una+demo+del+producto',
            content_type='application/x-www-form-urlencoded',
        )
        assert response.status_code == status.HTTP_201_CREATED

    def test_forwarded_address_is_recorded(self, api_client, valid_payload):
        response = api_client.post(
            '/api/contact', valid_payload, HTTP_X_FORWARDED_FOR='198.51.100.250, 192.0.2.33'
        )

        submission = ContactSubmission.objects.get(id=response.data['contactId'])
        assert submission.ip_address == '192.0.2.33'

    @pytest.mark.parametrize('field', ['nombre', 'empresa', 'email', 'telefono', 'mensaje'])
    def test_submit_missing_field(self, api_client, valid_payload, mailoutbox, field):
        """Test submission with one field missing."""
        del valid_payload[field]

        response = api_client.post('/api/contact', valid_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {
            'success': False,
            'error': 'Todos los campos son obligatorios',
        }
        assert ContactSubmission.objects.count() == 0
        assert mailoutbox == []

    @pytest.mark.parametrize('changes, error', [
        ({'nombre': 'A'}, 'El nombre debe tener entre 2 y 50 caracteres'),
        ({'nombre': 'A' * 51}, 'El nombre debe tener entre 2 y 50 caracteres'),
        ({'email': 'invalid-email'}, 'Email inválido'),
        ({'telefono': '0981-123-456'}, 'Teléfono inválido'),
        ({'mensaje': 'Corto'}, 'El mensaje debe tener entre 10 y 1000 caracteres'),
        ({'mensaje': 'x' * 1001}, 'El mensaje debe tener entre 10 y 1000 caracteres'),
    ])
    def test_submit_rule_violation(self, api_client, valid_payload, changes, error):
        valid_payload.update(changes)

        response = api_client.post('/api/contact', valid_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == error
        assert ContactSubmission.objects.count() == 0

    @pytest.mark.parametrize('changes', [
        {'nombre': 'Al'},
        {'nombre': 'A' * 50},
        {'mensaje': 'x' * 10},
        {'mensaje': 'x' * 1000},
    ])
    def test_submit_length_boundaries(self, api_client, valid_payload, changes):
        valid_payload.update(changes)

        response = api_client.post('/api/contact', valid_payload)

        assert response.status_code == status.HTTP_201_CREATED

    def test_submit_long_free_text_fields(self, api_client, valid_payload):
        """Company, email and phone have no length rule and are stored whole."""
        valid_payload.update({
            'empresa': 'E' * 300,
            'email': 'contacto@' + 'a' * 280 + '.com.py',
            'telefono': '+1' + ' ' * 80 + '5551234',
        })

        response = api_client.post('/api/contact', valid_payload)

        assert response.status_code == status.HTTP_201_CREATED
        submission = ContactSubmission.objects.get(id=response.data['contactId'])
        assert submission.company == 'E' * 300
        assert len(submission.phone) == 89

    def test_submit_non_text_value(self, api_client, valid_payload):
        valid_payload['nombre'] = ['María', 'González']

        response = api_client.post('/api/contact', valid_payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Formato de datos inválido'

    def test_notification_failure_keeps_submission(self, api_client, admin_client, valid_payload,
                                                   settings):
        settings.EMAIL_BACKEND = 'tests.email_backends.FailingEmailBackend'

        response = api_client.post('/api/contact', valid_payload)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {'success': False, 'error': GENERIC_ERROR}
        assert ContactSubmission.objects.count() == 1

        listing = admin_client.get('/api/admin/contacts')
        assert listing.data['contacts'][0]['email'] == 'maria@agropy.com.py'

    def test_storage_failure_sends_no_email(self, api_client, valid_payload, mailoutbox,
                                            contact_services):
        contact_services(
            store=BrokenStore(StorageUnavailable(cause=OperationalError('could not connect')))
        )

        response = api_client.post('/api/contact', valid_payload)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data['error'] == GENERIC_ERROR
        assert 'could not connect' not in response.content.decode()
        assert mailoutbox == []

    def test_unexpected_error_is_not_leaked(self, api_client, valid_payload, mailoutbox,
                                            contact_services):
        contact_services(store=BrokenStore(RuntimeError('secret connection string')))

        response = api_client.post('/api/contact', valid_payload)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {'success': False, 'error': GENERIC_ERROR}
        assert 'secret' not in response.content.decode()


@pytest.mark.django_db
class TestRateLimiting:
    """Test rate limiting for contact form."""

    def test_sixth_request_is_rejected(self, api_client, valid_payload):
        for _ in range(5):
            response = api_client.post('/api/contact', valid_payload)
            assert response.status_code == status.HTTP_201_CREATED

        response = api_client.post('/api/contact', valid_payload)

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.data == {
            'success': False,
            'error': 'Demasiados intentos de contacto. Intenta nuevamente en 15 minutos.',
        }
        assert int(response['Retry-After']) > 0
        assert response['RateLimit-Limit'] == '5'
        assert response['RateLimit-Remaining'] == '0'
        assert ContactSubmission.objects.count() == 5

    def test_invalid_submissions_count(self, api_client, valid_payload):
        for _ in range(5):
            response = api_client.post('/api/contact', {'nombre': 'X'})
            assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = api_client.post('/api/contact', valid_payload)

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert ContactSubmission.objects.count() == 0

    def test_headers_on_admitted_requests(self, api_client, valid_payload):
        response = api_client.post('/api/contact', valid_payload)

        assert response['RateLimit-Limit'] == '5'
        assert response['RateLimit-Remaining'] == '4'
        assert 'Retry-After' not in response

    def test_other_addresses_unaffected(self, api_client, valid_payload):
        for _ in range(6):
            api_client.post('/api/contact', valid_payload)

        response = api_client.post('/api/contact', valid_payload, REMOTE_ADDR='203.0.113.99')

        assert response.status_code == status.HTTP_201_CREATED

    def test_client_written_forwarded_entries_do_not_reset_quota(self, api_client, valid_payload):
        """Only the entry added by the proxy identifies the client."""
        codes = [
            api_client.post(
                '/api/contact', valid_payload,
                HTTP_X_FORWARDED_FOR=f'198.51.100.{i}, 192.0.2.50',
            ).status_code
            for i in range(6)
        ]

        assert codes == [status.HTTP_201_CREATED] * 5 + [status.HTTP_429_TOO_MANY_REQUESTS]
        assert ContactSubmission.objects.count() == 5

    def test_clients_behind_proxy_counted_separately(self, api_client, valid_payload):
        for _ in range(5):
            api_client.post('/api/contact', valid_payload, HTTP_X_FORWARDED_FOR='192.0.2.50')

        response = api_client.post(
            '/api/contact', valid_payload, HTTP_X_FORWARDED_FOR='192.0.2.51'
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_quota_returns_after_window(self, api_client, valid_payload):
        for _ in range(5):
            api_client.post('/api/contact', valid_payload)
        ContactFormRateLimitHit.objects.update(
            created_at=timezone.now() - timedelta(minutes=16)
        )

        response = api_client.post('/api/contact', valid_payload)

        assert response.status_code == status.HTTP_201_CREATED

    def test_health_is_not_limited(self, api_client):
        for _ in range(10):
            assert api_client.get('/api/health').status_code == status.HTTP_200_OK


class TestHealthAndErrors:

    def test_health(self, api_client):
        response = api_client.get('/api/health')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'OK'
        assert response.data['service'] == 'Zyph Technologies API'
        assert response.data['timestamp'].endswith('Z')

    def test_unknown_route(self, api_client):
        response = api_client.get('/api/does-not-exist')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {'success': False, 'error': 'Ruta no encontrada'}

    def test_wrong_method(self, api_client):
        response = api_client.get('/api/contact')

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert response.data['success'] is False


@pytest.mark.django_db
class TestAdminAuthentication:
    """Every admin route rejects requests without the exact token."""

    @pytest.mark.parametrize('url', ['/api/admin/stats', '/api/admin/contacts'])
    def test_missing_token(self, api_client, url):
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data == {'error': 'Token de autorización requerido'}
        assert response['WWW-Authenticate'] == 'Bearer'

    @pytest.mark.parametrize('header', [
        'Bearer wrong-token',
        'Bearer test-admin',
        'Bearer test-admin-token-extra',
        'Bearer test-admin-token extra',
        'Bearer',
    ])
    def test_wrong_token(self, api_client, header):
        response = api_client.get('/api/admin/stats', HTTP_AUTHORIZATION=header)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data == {'error': 'Token de autorización inválido'}

    def test_wrong_scheme(self, api_client):
        response = api_client.get('/api/admin/stats', HTTP_AUTHORIZATION='Token test-admin-token')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_empty_configured_token_rejects_everything(self, api_client, contact_services):
        contact_services(
            contact_settings=replace(ContactSettings.from_django_settings(), admin_token='')
        )

        response = api_client.get('/api/admin/stats', HTTP_AUTHORIZATION='Bearer ')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

        response = api_client.get('/api/admin/stats', HTTP_AUTHORIZATION='Bearer test-admin-token')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_valid_token(self, admin_client):
        assert admin_client.get('/api/admin/stats').status_code == status.HTTP_200_OK


@pytest.mark.django_db
class TestAdminStats:

    def test_empty(self, admin_client):
        response = admin_client.get('/api/admin/stats')

        assert response.data == {'total': 0, 'nuevos': 0, 'ultimaSemana': 0, 'procesados': 0}

    def test_counts(self, admin_client):
        old, contacted, _, _ = make_submissions(4)
        ContactSubmission.objects.filter(id=old.id).update(
            created_at=timezone.now() - timedelta(days=8)
        )
        ContactSubmission.objects.filter(id=contacted.id).update(
            status=ContactSubmission.STATUS_CONTACTED
        )

        response = admin_client.get('/api/admin/stats/')

        assert response.data == {'total': 4, 'nuevos': 3, 'ultimaSemana': 3, 'procesados': 1}


@pytest.mark.django_db
class TestAdminContactList:

    def test_newest_first_without_ip(self, admin_client):
        submissions = make_submissions(3)

        response = admin_client.get('/api/admin/contacts')

        assert response.status_code == status.HTTP_200_OK
        contacts = response.data['contacts']
        assert [c['id'] for c in contacts] == [str(s.id) for s in reversed(submissions)]
        assert set(contacts[0]) == {
            'id', 'nombre', 'empresa', 'email', 'telefono', 'mensaje', 'fechaCreacion', 'estado'
        }
        assert '198.51.100.1' not in response.content.decode()
        assert contacts[0]['estado'] == 'new'

    def test_default_pagination(self, admin_client):
        make_submissions(12)

        response = admin_client.get('/api/admin/contacts')

        assert len(response.data['contacts']) == 10
        assert response.data['pagination'] == {'page': 1, 'limit': 10, 'total': 12, 'pages': 2}

    def test_second_page(self, admin_client):
        submissions = make_submissions(12)

        response = admin_client.get('/api/admin/contacts?page=2&limit=10')

        assert [c['id'] for c in response.data['contacts']] == [
            str(submissions[1].id), str(submissions[0].id)
        ]

    def test_page_past_end(self, admin_client):
        make_submissions(5)

        response = admin_client.get('/api/admin/contacts?page=3&limit=10')

        assert response.data['contacts'] == []
        assert response.data['pagination'] == {'page': 3, 'limit': 10, 'total': 5, 'pages': 1}

    def test_bad_parameters_fall_back_to_defaults(self, admin_client):
        make_submissions(2)

        response = admin_client.get('/api/admin/contacts?page=abc&limit=-4')

        assert response.data['pagination'] == {'page': 1, 'limit': 10, 'total': 2, 'pages': 1}

    def test_huge_page_is_empty(self, admin_client):
        make_submissions(5)

        response = admin_client.get(f'/api/admin/contacts?page={10 ** 20}')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['contacts'] == []
        assert response.data['pagination']['total'] == 5
        assert response.data['pagination']['page'] == 10 ** 20

    def test_huge_limit_is_capped(self, admin_client):
        make_submissions(3)

        response = admin_client.get(f'/api/admin/contacts?limit={10 ** 20}')

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['contacts']) == 3
        assert response.data['pagination'] == {'page': 1, 'limit': 100, 'total': 3, 'pages': 1}

    def test_empty(self, admin_client):
        response = admin_client.get('/api/admin/contacts')

        assert response.data == {
            'contacts': [],
            'pagination': {'page': 1, 'limit': 10, 'total': 0, 'pages': 0},
        }


class TestSystemChecks:

    def test_missing_admin_token_warns(self, settings):
        settings.ADMIN_TOKEN = ''

        assert [w.id for w in check_admin_token(None)] == ['contact.W003']

    def test_admin_token_configured(self):
        assert check_admin_token(None) == []

    def test_smtp_without_credentials_warns(self, settings):
        settings.EMAIL_BACKEND = 'django.core.mail.backends.smtp.EmailBackend'
        settings.EMAIL_HOST_USER = ''

        assert [w.id for w in check_email_configuration(None)] == ['contact.W002']

    def test_locmem_needs_no_credentials(self):
        assert check_email_configuration(None) == []


def test_contact_id_is_uuid(api_client, valid_payload, db):
    response = api_client.post('/api/contact', valid_payload)

    assert uuid.UUID(response.data['contactId'])
