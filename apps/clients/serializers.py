from rest_framework import serializers
from .models import Client


class ClientSerializer(serializers.ModelSerializer):
    """Main serializer for clients."""

    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = Client
        fields = [
            'client_id',
            'first_name',
            'last_name',
            'company_name',
            'display_name',
            'document_number',
            'phone',
            'email',
            'address',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['client_id', 'created_at', 'updated_at']

    def validate(self, attrs):
        """A client needs either a person name or a company name."""
        first_name = attrs.get('first_name', getattr(self.instance, 'first_name', ''))
        last_name = attrs.get('last_name', getattr(self.instance, 'last_name', ''))
        company_name = attrs.get('company_name', getattr(self.instance, 'company_name', ''))
        if not (first_name or last_name or company_name):
            raise serializers.ValidationError(
                'Provide first_name/last_name or company_name.'
            )
        return attrs


class ClientMinimalSerializer(serializers.ModelSerializer):
    """Minimal client info for nested serialization."""

    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = Client
        fields = ['client_id', 'display_name', 'document_number']
        read_only_fields = fields
