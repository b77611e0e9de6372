"""Serializer fields shared by the ledger APIs."""

from rest_framework import serializers

from .money import exceeds_max_amount, round2


class MoneyField(serializers.DecimalField):
    """
    Decimal field that accepts any precision and rounds half-up to cents.

    DRF's DecimalField rejects '10.005' outright for decimal_places=2. The
    ledger instead rounds it with the same rule used in balance checks.
    """

    def __init__(self, **kwargs):
        kwargs.setdefault('max_digits', 12)
        kwargs.setdefault('decimal_places', 2)
        super().__init__(**kwargs)

    def validate_precision(self, value):
        if exceeds_max_amount(value):
            self.fail('max_digits', max_digits=self.max_digits)
        super().validate_precision(round2(value))
        return value

    def quantize(self, value):
        return round2(value)
