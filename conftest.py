"""
Shared pytest fixtures for the contact API tests.
"""
import pytest
from django.apps import apps
from rest_framework.test import APIClient

from contact.services import build_services


ADMIN_TOKEN = 'test-admin-token'


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient(REMOTE_ADDR='203.0.113.10')


@pytest.fixture
def admin_client():
    """API client carrying the admin bearer token."""
    client = APIClient(REMOTE_ADDR='203.0.113.20')
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {ADMIN_TOKEN}')
    return client


@pytest.fixture
def valid_payload():
    return {
        'nombre': 'María González',
        'empresa': 'Agro Paraguay SA',
        'email': 'maria@agropy.com.py',
        'telefono': '+595 (21) 123-4567',
        'mensaje': 'Queremos automatizar el reporte de ventas semanal.',
    }


@pytest.fixture
def contact_services(monkeypatch):
    """
    Replace the contact components the views use for one test.

    Call it with build_services() keyword arguments; returns the new
    ContactServices.
    """
    config = apps.get_app_config('contact')

    def install(**overrides):
        services = build_services(**overrides)
        monkeypatch.setattr(config, 'services', services)
        return services

    return install
