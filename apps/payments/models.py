from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from apps.common.money import round2


class PaymentType(models.TextChoices):
    SALE = 'sale', 'Sale'
    CREDIT = 'credit', 'Credit'
    OTHER = 'other', 'Other'


class PaymentStatus(models.TextChoices):
    COMPLETED = 'completed', 'Completed'
    PENDING = 'pending', 'Pending'
    CANCELLED = 'cancelled', 'Cancelled'


class PaymentMethod(models.Model):
    """Cash, card, transfer, Yape..."""

    payment_method_id = models.BigAutoField(primary_key=True)
    name = models.CharField(max_length=50, unique=True)
    description = models.CharField(max_length=255, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payment_methods'
        ordering = ['name']

    def __str__(self):
        return self.name


class ImmutablePaymentError(Exception):
    """Raised when code tries to change the amount of a recorded payment."""
    pass


class Payment(models.Model):
    """
    Append-only record of money received.

    Credit payments form the audit trail of a credit; the running total
    lives on Credit.amount_paid and is never re-summed from this table.
    """

    payment_id = models.BigAutoField(primary_key=True)

    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )

    payment_method = models.ForeignKey(
        PaymentMethod,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='payments'
    )

    # Null for sale and standalone payments
    credit = models.ForeignKey(
        'credits.Credit',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payments'
    )
    sale_id = models.PositiveIntegerField(null=True, blank=True, db_index=True)

    payment_type = models.CharField(
        max_length=20,
        choices=PaymentType.choices,
        default=PaymentType.SALE
    )
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.COMPLETED
    )

    # Staff member who took the payment
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payments_recorded'
    )

    notes = models.TextField(blank=True)
    payment_timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payments'
        indexes = [
            models.Index(fields=['credit', 'payment_timestamp']),
            models.Index(fields=['payment_type', 'payment_timestamp']),
            models.Index(fields=['payment_method', 'payment_timestamp']),
            models.Index(fields=['status']),
        ]
        ordering = ['-payment_timestamp', '-payment_id']

    def __str__(self):
        target = f"credit #{self.credit_id}" if self.credit_id else self.payment_type
        return f"Payment #{self.payment_id} - {self.amount} ({target})"

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_amount = instance.__dict__.get('amount')
        return instance

    def save(self, *args, **kwargs):
        loaded = getattr(self, '_loaded_amount', None)
        if not self._state.adding and loaded is not None and round2(self.amount) != loaded:
            raise ImmutablePaymentError(
                f"Payment {self.payment_id} amount cannot change; "
                f"record a compensating payment instead"
            )
        super().save(*args, **kwargs)
        self._loaded_amount = self.amount
