from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q


class CreditStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'
    OVERDUE = 'overdue', 'Overdue'


class CreditQuerySet(models.QuerySet):
    """Filters mirroring the status derivation rule at the database level."""

    def settled(self):
        return self.filter(amount_paid__gte=F('credit_amount'))

    def outstanding(self):
        return self.filter(amount_paid__lt=F('credit_amount'))

    def overdue(self, today):
        return self.outstanding().filter(due_date__lt=today)

    def pending(self, today):
        return self.outstanding().filter(due_date__gte=today)

    def with_status(self, status, today):
        if status == CreditStatus.PAID:
            return self.settled()
        if status == CreditStatus.OVERDUE:
            return self.overdue(today)
        return self.pending(today)


class Credit(models.Model):
    """Money owed by a client, paid down over time through payments."""

    credit_id = models.BigAutoField(primary_key=True)

    client = models.ForeignKey(
        'clients.Client',
        on_delete=models.PROTECT,
        related_name='credits'
    )

    # Originating sale lives in the POS; kept as a plain reference
    sale_id = models.PositiveIntegerField(null=True, blank=True, db_index=True)

    credit_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    amount_paid = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    due_date = models.DateField()

    # Stored snapshot; the authoritative value is always derived
    status = models.CharField(
        max_length=20,
        choices=CreditStatus.choices,
        default=CreditStatus.PENDING
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CreditQuerySet.as_manager()

    class Meta:
        db_table = 'credits'
        indexes = [
            models.Index(fields=['due_date']),
            models.Index(fields=['status']),
            models.Index(fields=['client', 'due_date']),
        ]
        ordering = ['due_date', 'credit_id']
        constraints = [
            models.CheckConstraint(
                condition=Q(amount_paid__lte=F('credit_amount')),
                name='credit_paid_not_above_amount',
            ),
            models.CheckConstraint(
                condition=Q(amount_paid__gte=0),
                name='credit_paid_not_negative',
            ),
        ]

    def __str__(self):
        return f"Credit #{self.credit_id} - {self.credit_amount} ({self.status})"

    @property
    def balance(self):
        """Remaining amount owed."""
        return max(Decimal('0.00'), self.credit_amount - self.amount_paid)
