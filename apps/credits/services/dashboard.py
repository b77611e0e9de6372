"""Read-only aggregations over the credit ledger."""

import datetime
from typing import Dict, List, Optional

from django.utils import timezone

from ..models import Credit, CreditStatus
from .credit_store import derive_status, recompute_status


def overdue_credits(today: Optional[datetime.date] = None) -> List[Credit]:
    """
    Credits past their due date with a remaining balance.

    Status is shown as overdue whatever the stored value; nothing is saved.
    """
    if today is None:
        today = timezone.localdate()

    credits = list(
        Credit.objects
        .overdue(today)
        .select_related('client')
        .order_by('due_date', 'credit_id')
    )
    for credit in credits:
        recompute_status(credit, today=today)
    return credits


def dashboard_counts(today: Optional[datetime.date] = None) -> Dict[str, int]:
    """Count every credit by derived status."""
    if today is None:
        today = timezone.localdate()

    counts = {
        CreditStatus.PAID.value: 0,
        CreditStatus.OVERDUE.value: 0,
        CreditStatus.PENDING.value: 0,
    }
    rows = Credit.objects.values_list('credit_amount', 'amount_paid', 'due_date')
    for credit_amount, amount_paid, due_date in rows.iterator():
        counts[derive_status(credit_amount, amount_paid, due_date, today)] += 1
    return counts


def credits_for_dashboard() -> List[Credit]:
    """Lightweight credit list for dashboard widgets, newest first."""
    return list(
        Credit.objects
        .only(
            'credit_id', 'client_id', 'sale_id', 'credit_amount', 'amount_paid',
            'due_date', 'status', 'created_at', 'updated_at',
        )
        .order_by('-created_at', '-credit_id')
    )
