from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from apps.common.fields import MoneyField
from .models import Payment, PaymentMethod, PaymentStatus, PaymentType


class PaymentMethodSerializer(serializers.ModelSerializer):
    """Serializer for payment methods."""

    class Meta:
        model = PaymentMethod
        fields = ['payment_method_id', 'name', 'description', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['payment_method_id', 'created_at', 'updated_at']


class PaymentSerializer(serializers.ModelSerializer):
    """Read-only view of a recorded payment."""

    amount = MoneyField(read_only=True)
    payment_method_id = serializers.IntegerField(read_only=True)
    payment_method_name = serializers.CharField(source='payment_method.name', read_only=True, default=None)
    credit_id = serializers.IntegerField(read_only=True)
    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Payment
        fields = [
            'payment_id',
            'amount',
            'payment_method_id',
            'payment_method_name',
            'credit_id',
            'sale_id',
            'payment_type',
            'status',
            'user',
            'notes',
            'payment_timestamp',
        ]
        read_only_fields = fields


# =============================================================================
# Input serializers
# =============================================================================

class PaymentCreateSerializer(serializers.Serializer):
    """Input for sale and standalone payments."""

    amount = MoneyField()
    payment_type = serializers.ChoiceField(choices=PaymentType.choices, default=PaymentType.SALE)
    sale_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    payment_method_id = serializers.IntegerField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    status = serializers.ChoiceField(choices=PaymentStatus.choices, required=False)


class PaymentMethodUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, max_length=50)
    description = serializers.CharField(required=False, allow_blank=True, max_length=255)
    is_active = serializers.BooleanField(required=False)


class DateRangeSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()

    def validate(self, attrs):
        if attrs['start_date'] > attrs['end_date']:
            raise serializers.ValidationError('start_date must not be after end_date')
        return attrs


class RecentPaymentsQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(required=False, default=1, min_value=1)
    page_size = serializers.IntegerField(required=False, default=10, min_value=1, max_value=100)


# =============================================================================
# Report serializers
# =============================================================================

class ConciliationRowSerializer(serializers.Serializer):
    payment_method = serializers.CharField()
    transaction_count = serializers.IntegerField()
    total_amount = MoneyField()


class PaymentStatusSummarySerializer(serializers.Serializer):
    status = serializers.CharField()
    count = serializers.IntegerField()
    total_amount = MoneyField()


class RecentCreditPaymentSerializer(serializers.Serializer):
    payment_id = serializers.IntegerField()
    amount = MoneyField()
    method = serializers.CharField(allow_null=True)
    timestamp = serializers.DateTimeField()
    credit_id = serializers.IntegerField(allow_null=True)
    client_name = serializers.CharField()
    sale_id = serializers.IntegerField(allow_null=True)
    status = serializers.CharField()


class RecentCreditPaymentsPageSerializer(serializers.Serializer):
    items = RecentCreditPaymentSerializer(many=True)
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    page_size = serializers.IntegerField()
