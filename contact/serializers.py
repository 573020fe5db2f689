"""
Contact Serializers

Wire format for the contact form and the admin API. The public API
speaks the Spanish field names the website sends.
"""
from rest_framework import serializers

from .models import ContactSubmission


class ContactFormSubmitSerializer(serializers.Serializer):
    """
    Public contact form submission.

    Only maps wire names to model field names and checks that values are
    scalars; the field rules live in contact.validators so they run in
    a fixed order and stop at the first failure.
    """

    nombre = serializers.CharField(
        source='name', required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )
    empresa = serializers.CharField(
        source='company', required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )
    email = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )
    telefono = serializers.CharField(
        source='phone', required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )
    mensaje = serializers.CharField(
        source='message', required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )


class ContactSubmissionListSerializer(serializers.ModelSerializer):
    """
    Submission as shown in the admin listing.

    The source IP address is deliberately not part of this representation.
    """

    nombre = serializers.CharField(source='name', read_only=True)
    empresa = serializers.CharField(source='company', read_only=True)
    telefono = serializers.CharField(source='phone', read_only=True)
    mensaje = serializers.CharField(source='message', read_only=True)
    fechaCreacion = serializers.DateTimeField(source='created_at', read_only=True)
    estado = serializers.CharField(source='status', read_only=True)

    class Meta:
        model = ContactSubmission
        fields = [
            'id', 'nombre', 'empresa', 'email', 'telefono', 'mensaje',
            'fechaCreacion', 'estado'
        ]
        read_only_fields = fields


class ContactStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    nuevos = serializers.IntegerField()
    ultimaSemana = serializers.IntegerField()
    procesados = serializers.IntegerField()
