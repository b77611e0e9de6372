"""Payment lookups, reports and standalone (non-credit) payments."""

import datetime
import logging
from typing import Any, Dict, List, Optional

from django.db import transaction
from django.db.models import Count, DecimalField, Sum, Value
from django.db.models.functions import Coalesce

from apps.common.money import ZERO, round2

from ..models import Payment, PaymentType
from .exceptions import (
    CreditPaymentNotAllowedError,
    InvalidPaymentError,
    PaymentNotFoundError,
)
from .recorder import record_payment

logger = logging.getLogger(__name__)

NO_CLIENT = 'No client'


def _base_queryset():
    return Payment.objects.select_related('payment_method', 'user', 'credit')


def list_payments() -> List[Payment]:
    """All payments, newest first."""
    return list(_base_queryset().order_by('-payment_timestamp', '-payment_id'))


def get_payment(payment_id: int) -> Payment:
    """
    Raises:
        PaymentNotFoundError: If payment doesn't exist
    """
    try:
        return _base_queryset().get(pk=payment_id)
    except Payment.DoesNotExist:
        raise PaymentNotFoundError(f"Payment {payment_id} not found")


def payments_for_credit(credit_id: int) -> List[Payment]:
    """Audit trail of one credit, oldest first."""
    return list(
        _base_queryset()
        .filter(credit_id=credit_id)
        .order_by('payment_timestamp', 'payment_id')
    )


def payments_by_method(method_id: int) -> List[Payment]:
    return list(
        _base_queryset()
        .filter(payment_method_id=method_id)
        .order_by('-payment_timestamp', '-payment_id')
    )


def payments_by_date_range(start: datetime.date, end: datetime.date) -> List[Payment]:
    """Payments whose local timestamp date falls within [start, end]."""
    if start > end:
        raise InvalidPaymentError('start_date must not be after end_date')
    return list(
        _base_queryset()
        .filter(payment_timestamp__date__gte=start, payment_timestamp__date__lte=end)
        .order_by('-payment_timestamp', '-payment_id')
    )


def _money_sum():
    return Coalesce(
        Sum('amount'),
        Value(ZERO),
        output_field=DecimalField(max_digits=14, decimal_places=2),
    )


def conciliation_report(day: datetime.date) -> List[Dict[str, Any]]:
    """
    Totals per payment method for one calendar day.

    Payments recorded without a method are left out.

    Returns:
        [{'payment_method': str, 'transaction_count': int,
          'total_amount': Decimal}, ...] ordered by method name
    """
    rows = (
        Payment.objects
        .filter(payment_timestamp__date=day, payment_method__isnull=False)
        .values('payment_method__name')
        .annotate(transaction_count=Count('payment_id'), total_amount=_money_sum())
        .order_by('payment_method__name')
    )
    return [
        {
            'payment_method': row['payment_method__name'],
            'transaction_count': row['transaction_count'],
            'total_amount': round2(row['total_amount']),
        }
        for row in rows
    ]


def payment_status_summary() -> List[Dict[str, Any]]:
    """Count and total amount per payment status."""
    rows = (
        Payment.objects
        .values('status')
        .annotate(count=Count('payment_id'), total_amount=_money_sum())
        .order_by('status')
    )
    return [
        {
            'status': row['status'],
            'count': row['count'],
            'total_amount': round2(row['total_amount']),
        }
        for row in rows
    ]


def recent_credit_payments(page: int = 1, page_size: int = 10) -> Dict[str, Any]:
    """
    Paginated credit payments, newest first, with the owning client's name.

    Returns:
        {'items': [...], 'total': int, 'page': int, 'page_size': int}
    """
    page = max(1, int(page))
    page_size = min(100, max(1, int(page_size)))

    queryset = (
        Payment.objects
        .filter(payment_type=PaymentType.CREDIT)
        .select_related('payment_method', 'credit__client')
        .order_by('-payment_timestamp', '-payment_id')
    )
    total = queryset.count()
    offset = (page - 1) * page_size

    items = []
    for payment in queryset[offset:offset + page_size]:
        credit = payment.credit
        client = credit.client if credit is not None else None
        items.append({
            'payment_id': payment.payment_id,
            'amount': round2(payment.amount),
            'method': payment.payment_method.name if payment.payment_method else None,
            'timestamp': payment.payment_timestamp,
            'credit_id': payment.credit_id,
            'client_name': client.display_name if client is not None else NO_CLIENT,
            'sale_id': credit.sale_id if credit is not None else payment.sale_id,
            'status': payment.status,
        })

    return {
        'items': items,
        'total': total,
        'page': page,
        'page_size': page_size,
    }


@transaction.atomic
def create_standalone_payment(
    *,
    amount,
    payment_type: str = PaymentType.SALE,
    sale_id: Optional[int] = None,
    payment_method_id: Optional[int] = None,
    user=None,
    notes: Optional[str] = None,
    status: Optional[str] = None
) -> Payment:
    """
    Record a sale or standalone payment.

    Raises:
        CreditPaymentNotAllowedError: payment_type is credit
        InvalidPaymentError: Amount does not round to a positive value
        PaymentMethodNotFoundError: Payment method doesn't exist
    """
    if payment_type == PaymentType.CREDIT:
        raise CreditPaymentNotAllowedError(
            'Credit payments must be registered through the credit endpoints'
        )

    extra = {'status': status} if status else {}
    payment = record_payment(
        amount=amount,
        payment_type=payment_type,
        sale_id=sale_id,
        payment_method_id=payment_method_id,
        user=user,
        notes=notes,
        **extra
    )
    logger.info(
        "Payment %s recorded: %s %s (sale=%s)",
        payment.payment_id, payment_type, payment.amount, sale_id,
    )
    return payment
