"""
Payment transactions against the credit ledger.

Both entry points follow the same unit of work: lock the credit row, check
the payment against the remaining balance, insert the payment, apply it to
amount_paid, derive the status again and save. Everything happens in one
transaction on the given database alias; any failure rolls the whole unit
back before the error reaches the caller.
"""

import datetime
import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, DatabaseError, transaction
from django.utils import timezone

from apps.common.money import (
    MAX_AMOUNT,
    ZERO,
    exceeds_max_amount,
    format_money,
    round2,
    to_decimal,
)
from apps.payments.models import Payment, PaymentStatus, PaymentType
from apps.payments.services.recorder import record_payment

from ..models import Credit
from .credit_store import get_credit_for_update, recompute_status
from .exceptions import (
    CreditValidationError,
    ExceedsBalanceError,
    InvalidAmountError,
    LedgerStorageError,
)

logger = logging.getLogger(__name__)


def _money(value) -> str:
    return format_money(value, getattr(settings, 'LEDGER_CURRENCY', ''))


def _apply_payment(
    credit: Credit,
    amount: Decimal,
    *,
    using: str,
    today: datetime.date,
    payment_method_id: Optional[int],
    user,
    notes: Optional[str]
) -> Payment:
    """Check, record and apply one payment to a credit locked by the caller."""
    balance = round2(credit.credit_amount - credit.amount_paid)
    if amount > balance:
        raise ExceedsBalanceError(
            f"Payment of {_money(amount)} exceeds the balance of credit "
            f"#{credit.credit_id} (balance: {_money(balance)})",
            credit_id=credit.credit_id,
            amount=amount,
            balance=balance,
        )

    payment = record_payment(
        using=using,
        amount=amount,
        payment_type=PaymentType.CREDIT,
        credit=credit,
        payment_method_id=payment_method_id,
        user=user,
        notes=notes,
        status=PaymentStatus.COMPLETED,
    )

    credit.amount_paid = round2(credit.amount_paid + amount)
    recompute_status(credit, today=today)
    credit.save(using=using, update_fields=['amount_paid', 'status', 'updated_at'])
    return payment


def pay_credit(
    *,
    credit_id: int,
    amount,
    reference: Optional[str] = None,
    payment_method_id: Optional[int] = None,
    user=None,
    using: str = DEFAULT_DB_ALIAS,
    today: Optional[datetime.date] = None
) -> Credit:
    """
    Apply a single payment to a credit.

    Args:
        credit_id: Credit being paid down
        amount: Payment amount, rounded half-up to cents
        reference: Optional note stored on the payment (trimmed)
        payment_method_id: Optional payment method
        user: Staff member taking the payment
        using: Database alias the transaction runs on

    Returns:
        Updated Credit

    Raises:
        InvalidAmountError: Amount does not round to a positive value, or
            does not fit a money column
        CreditNotFoundError: Credit doesn't exist
        ExceedsBalanceError: Amount is larger than the remaining balance
        PaymentMethodNotFoundError: Payment method doesn't exist
        LedgerStorageError: Database failure (lock timeout, lost connection)
    """
    rounded = round2(amount)
    if rounded <= ZERO:
        raise InvalidAmountError('Payment amount must be greater than 0')
    if exceeds_max_amount(rounded):
        raise InvalidAmountError(f"Payment amount must not exceed {MAX_AMOUNT}")
    if today is None:
        today = timezone.localdate()

    try:
        with transaction.atomic(using=using):
            credit = get_credit_for_update(credit_id, using=using)
            payment = _apply_payment(
                credit,
                rounded,
                using=using,
                today=today,
                payment_method_id=payment_method_id,
                user=user,
                notes=reference,
            )
    except DatabaseError as e:
        logger.error("Payment on credit %s failed in storage: %s", credit_id, e)
        raise LedgerStorageError(f"Could not record payment on credit {credit_id}") from e
    except Exception as e:
        logger.warning("Payment on credit %s rolled back: %s", credit_id, e)
        raise

    logger.info(
        "Payment %s of %s applied to credit %s (paid %s/%s, status %s)",
        payment.payment_id, rounded, credit.credit_id,
        credit.amount_paid, credit.credit_amount, credit.status,
    )
    return credit


def _coerce_credit_id(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        credit_id = value
    else:
        number = to_decimal(value)
        if number != number.to_integral_value():
            return None
        credit_id = int(number)
    return credit_id if credit_id > 0 else None


def merge_bulk_items(items: Iterable[Any]) -> List[Tuple[int, Decimal]]:
    """
    Normalize bulk payment items into (credit_id, amount) pairs.

    Items with a missing or non-positive credit id, or an amount that does
    not round to a positive value or is larger than MAX_AMOUNT, are dropped
    one by one. Amounts for the same credit are summed into a single entry,
    and the result is sorted by ascending credit id, which is the order rows
    get locked in.

    Example:
        >>> merge_bulk_items([{'credit_id': 7, 'amount': 30},
        ...                   {'credit_id': 3, 'amount': '5.5'},
        ...                   {'credit_id': 7, 'amount': 20}])
        [(3, Decimal('5.50')), (7, Decimal('50.00'))]
    """
    merged: Dict[int, Decimal] = {}
    for item in items:
        if not isinstance(item, Mapping):
            continue
        credit_id = _coerce_credit_id(item.get('credit_id'))
        amount = round2(item.get('amount'))
        if credit_id is None or amount <= ZERO or exceeds_max_amount(amount):
            continue
        merged[credit_id] = round2(merged.get(credit_id, ZERO) + amount)
    return sorted(merged.items())


def pay_credits_bulk(
    *,
    items,
    payment_method_id: Optional[int] = None,
    user=None,
    notes: Optional[str] = None,
    using: str = DEFAULT_DB_ALIAS,
    today: Optional[datetime.date] = None
) -> Dict[str, Any]:
    """
    Apply many payments across many credits as one all-or-nothing unit.

    Duplicate credit ids are merged and paid with one payment for the
    combined amount. If any credit is missing or any merged amount exceeds
    its credit's balance, nothing from the batch is applied.

    Returns:
        {'updated': [Credit], 'payments': [Payment], 'count': int,
         'total_amount': Decimal}

    Raises:
        CreditValidationError: No items, or no valid item left after merging
        CreditNotFoundError: A credit in the batch doesn't exist
        ExceedsBalanceError: A merged amount exceeds its credit's balance
        PaymentMethodNotFoundError: Payment method doesn't exist
        LedgerStorageError: Database failure (lock timeout, lost connection)
    """
    if not items or isinstance(items, (str, bytes, Mapping)):
        raise CreditValidationError('At least one payment item is required')

    merged = merge_bulk_items(items)
    if not merged:
        raise CreditValidationError('No payment item has a valid credit id and amount')
    if today is None:
        today = timezone.localdate()

    updated: List[Credit] = []
    payments: List[Payment] = []
    try:
        with transaction.atomic(using=using):
            for credit_id, amount in merged:
                credit = get_credit_for_update(credit_id, using=using)
                payment = _apply_payment(
                    credit,
                    amount,
                    using=using,
                    today=today,
                    payment_method_id=payment_method_id,
                    user=user,
                    notes=notes,
                )
                updated.append(credit)
                payments.append(payment)
    except DatabaseError as e:
        logger.error("Bulk payment of %d credit(s) failed in storage: %s", len(merged), e)
        raise LedgerStorageError('Could not record bulk payment') from e
    except Exception as e:
        logger.warning("Bulk payment of %d credit(s) rolled back: %s", len(merged), e)
        raise

    total_amount = round2(sum((payment.amount for payment in payments), ZERO))
    logger.info(
        "Bulk payment applied: %d payment(s), total %s, credits %s",
        len(payments), total_amount, [credit.credit_id for credit in updated],
    )
    return {
        'updated': updated,
        'payments': payments,
        'count': len(payments),
        'total_amount': total_amount,
    }
