from rest_framework import serializers

from apps.accounts.models import User
from apps.clients.serializers import ClientMinimalSerializer
from apps.common.fields import MoneyField
from apps.payments.serializers import PaymentSerializer
from .models import Credit, CreditStatus


class CreditSerializer(serializers.ModelSerializer):
    """Main serializer for credits."""

    client = ClientMinimalSerializer(read_only=True)
    client_id = serializers.IntegerField(read_only=True)
    credit_amount = MoneyField(read_only=True)
    amount_paid = MoneyField(read_only=True)
    balance = MoneyField(read_only=True)

    class Meta:
        model = Credit
        fields = [
            'credit_id',
            'client_id',
            'client',
            'sale_id',
            'credit_amount',
            'amount_paid',
            'balance',
            'due_date',
            'status',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class CreditDashboardSerializer(serializers.ModelSerializer):
    """Lightweight serializer for dashboard widgets."""

    client_id = serializers.IntegerField(read_only=True)
    credit_amount = MoneyField(read_only=True)
    amount_paid = MoneyField(read_only=True)

    class Meta:
        model = Credit
        fields = [
            'credit_id',
            'client_id',
            'sale_id',
            'credit_amount',
            'amount_paid',
            'due_date',
            'status',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


# =============================================================================
# Input serializers
# =============================================================================

class CreditCreateSerializer(serializers.Serializer):
    client_id = serializers.IntegerField(min_value=1)
    sale_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    credit_amount = MoneyField()
    due_date = serializers.DateField()


class CreditUpdateSerializer(serializers.Serializer):
    """Administrative update. status is accepted but derived again."""

    client_id = serializers.IntegerField(required=False, min_value=1)
    sale_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    credit_amount = MoneyField(required=False)
    amount_paid = MoneyField(required=False)
    due_date = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=CreditStatus.choices, required=False)


class CreditFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=CreditStatus.choices, required=False)
    overdue = serializers.BooleanField(required=False, default=False)


class PayCreditInputSerializer(serializers.Serializer):
    """
    Body of a single credit payment.

    reference and notes are synonyms; reference wins when both are sent.
    user_id defaults to the authenticated user.
    """

    amount = MoneyField()
    payment_method_id = serializers.IntegerField(required=False, allow_null=True)
    user_id = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.all(),
        source='user',
        required=False,
        allow_null=True,
    )
    reference = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class BulkPaymentInputSerializer(serializers.Serializer):
    """
    Body of a bulk payment.

    Items are kept raw; malformed entries are dropped by the ledger when
    duplicates are merged.
    """

    items = serializers.ListField(child=serializers.DictField(), allow_empty=True)
    payment_method_id = serializers.IntegerField(required=False, allow_null=True)
    user_id = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.all(),
        source='user',
        required=False,
        allow_null=True,
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


# =============================================================================
# Response serializers
# =============================================================================

class BulkPaymentResultSerializer(serializers.Serializer):
    """
    Outcome of a bulk payment.

    The summed amount is exposed as `total_amount` (snake_case like every
    other field of this API), not `totalAmount`.
    """

    updated = CreditSerializer(many=True)
    payments = PaymentSerializer(many=True)
    count = serializers.IntegerField()
    total_amount = MoneyField()


class DashboardCountsSerializer(serializers.Serializer):
    paid = serializers.IntegerField()
    overdue = serializers.IntegerField()
    pending = serializers.IntegerField()
