"""
Admin Token Authentication

The admin API is protected by a single shared bearer token:

    Authorization: Bearer <ADMIN_TOKEN>
"""
from django.utils.crypto import constant_time_compare
from rest_framework import authentication

from .exceptions import AdminUnauthorized


class AdminPrincipal:
    """Stand-in user for requests carrying the admin token."""

    is_authenticated = True
    is_anonymous = False

    def __str__(self):
        return 'admin-token'


class AdminTokenAuthentication(authentication.BaseAuthentication):
    """
    Accept only the configured admin token.

    Missing, malformed and wrong tokens all fail before the view runs.
    An empty configured token rejects every request.
    """

    keyword = 'Bearer'

    def get_expected_token(self, request):
        view = request.parser_context.get('view') if request.parser_context else None
        return view.get_contact_settings().admin_token if view is not None else ''

    def authenticate(self, request):
        auth = authentication.get_authorization_header(request).split()

        if not auth or auth[0].lower() != self.keyword.lower().encode():
            raise AdminUnauthorized('Token de autorización requerido')

        if len(auth) != 2:
            raise AdminUnauthorized('Token de autorización inválido')

        try:
            token = auth[1].decode()
        except UnicodeError:
            raise AdminUnauthorized('Token de autorización inválido')

        expected = self.get_expected_token(request)
        if not expected or not constant_time_compare(token, expected):
            raise AdminUnauthorized('Token de autorización inválido')

        return (AdminPrincipal(), token)

    def authenticate_header(self, request):
        return self.keyword
