"""Payment recorder: the single building block that inserts payment rows."""

import logging
from typing import Optional

from django.db import DEFAULT_DB_ALIAS

from apps.common.db import ensure_atomic
from apps.common.money import MAX_AMOUNT, ZERO, exceeds_max_amount, round2

from ..models import Payment, PaymentMethod, PaymentStatus
from .exceptions import InvalidPaymentError, PaymentMethodNotFoundError

logger = logging.getLogger(__name__)


def record_payment(
    *,
    using: str = DEFAULT_DB_ALIAS,
    amount,
    payment_type: str,
    credit=None,
    sale_id: Optional[int] = None,
    payment_method_id: Optional[int] = None,
    user=None,
    notes: Optional[str] = None,
    status: str = PaymentStatus.COMPLETED
) -> Payment:
    """
    Insert one payment inside the caller's transaction.

    Never opens a transaction of its own; callers wrap it together with the
    balance update it belongs to.

    Args:
        using: Database alias whose atomic block must already be open
        amount: Payment amount, rounded half-up to cents
        payment_type: sale, credit or other
        credit: Credit being paid down (None for non-credit payments)
        sale_id: Originating sale, if any
        payment_method_id: Optional PaymentMethod primary key
        user: Staff member recording the payment
        notes: Free text, trimmed; blank notes are stored as ''

    Returns:
        Created Payment

    Raises:
        TransactionManagementError: Called outside transaction.atomic(using)
        InvalidPaymentError: If amount does not round to a positive value
        PaymentMethodNotFoundError: If payment method doesn't exist
    """
    ensure_atomic(using, 'record_payment()')

    rounded = round2(amount)
    if rounded <= ZERO:
        raise InvalidPaymentError('Payment amount must be greater than 0')
    if exceeds_max_amount(rounded):
        raise InvalidPaymentError(f"Payment amount must not exceed {MAX_AMOUNT}")

    if payment_method_id is not None:
        exists = PaymentMethod.objects.using(using).filter(pk=payment_method_id).exists()
        if not exists:
            raise PaymentMethodNotFoundError(
                f"Payment method {payment_method_id} not found"
            )

    payment = Payment(
        amount=rounded,
        payment_type=payment_type,
        credit=credit,
        sale_id=sale_id,
        payment_method_id=payment_method_id,
        user=user,
        notes=(notes or '').strip(),
        status=status,
    )
    payment.save(using=using)

    logger.debug(
        "Payment %s recorded: %s %s (credit=%s)",
        payment.payment_id, payment_type, rounded,
        credit.pk if credit is not None else None,
    )
    return payment
