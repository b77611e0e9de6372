"""Credit record CRUD, status derivation and locked reads."""

import datetime
import logging
from typing import Any, Dict, List, Optional, Tuple

from django.db import DEFAULT_DB_ALIAS, transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

from apps.clients.models import Client
from apps.common.db import ensure_atomic
from apps.common.money import CENT, MAX_AMOUNT, ZERO, exceeds_max_amount, round2

from ..models import Credit, CreditStatus
from .exceptions import CreditNotFoundError, CreditValidationError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('client_id', 'sale_id', 'credit_amount', 'amount_paid', 'due_date')


def derive_status(credit_amount, amount_paid, due_date, today: datetime.date) -> str:
    """
    Derive the status of a credit from its amounts and due date.

    paid when everything is paid, overdue when a balance remains after the
    due date, pending otherwise.
    """
    if round2(amount_paid) >= round2(credit_amount):
        return CreditStatus.PAID
    if due_date is not None and due_date < today:
        return CreditStatus.OVERDUE
    return CreditStatus.PENDING


def recompute_status(credit: Credit, today: Optional[datetime.date] = None) -> Credit:
    """
    Normalize amounts and set ``credit.status`` in memory.

    The caller is responsible for persisting the credit.
    """
    if today is None:
        today = timezone.localdate()
    credit.credit_amount = round2(credit.credit_amount)
    credit.amount_paid = round2(credit.amount_paid)
    credit.status = derive_status(
        credit.credit_amount, credit.amount_paid, credit.due_date, today
    )
    return credit


def _coerce_due_date(value) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    parsed = None
    if isinstance(value, str):
        try:
            parsed = parse_date(value.strip())
        except ValueError:
            parsed = None
    if parsed is None:
        raise CreditValidationError(f"Invalid due_date: {value!r}")
    return parsed


def _ensure_client(client_id) -> None:
    if client_id is None or not Client.objects.filter(pk=client_id).exists():
        raise CreditValidationError(f"Client {client_id} not found")


@transaction.atomic
def create_credit(
    *,
    client_id: int,
    credit_amount,
    due_date,
    sale_id: Optional[int] = None
) -> Credit:
    """
    Register a new credit for a client.

    Args:
        client_id: Owning client
        credit_amount: Total owed, rounded half-up to cents
        due_date: Date the credit must be settled by
        sale_id: Optional originating sale

    Returns:
        Created Credit with amount_paid = 0 and status pending

    Raises:
        CreditValidationError: Amount below 0.01 or above the column limit,
            bad due date or unknown client
    """
    amount = round2(credit_amount)
    if amount < CENT:
        raise CreditValidationError('Credit amount must be at least 0.01')
    if exceeds_max_amount(amount):
        raise CreditValidationError(f"Credit amount must not exceed {MAX_AMOUNT}")

    due = _coerce_due_date(due_date)
    _ensure_client(client_id)

    credit = Credit.objects.create(
        client_id=client_id,
        sale_id=sale_id,
        credit_amount=amount,
        amount_paid=ZERO,
        due_date=due,
        status=CreditStatus.PENDING,
    )
    logger.info("Credit %s created for client %s: %s", credit.credit_id, client_id, amount)
    return credit


def list_credits(
    *,
    status: Optional[str] = None,
    overdue: bool = False,
    today: Optional[datetime.date] = None
) -> List[Credit]:
    """
    List credits ordered by ascending due date.

    Args:
        status: Keep only credits whose derived status matches
        overdue: Keep only credits past due with a remaining balance
        today: Reference date (defaults to the local date)

    Returns:
        Credits with normalized amounts and recomputed status
    """
    if today is None:
        today = timezone.localdate()

    queryset = Credit.objects.select_related('client')

    if status:
        if status not in CreditStatus.values:
            raise CreditValidationError(f"Unknown credit status: {status}")
        queryset = queryset.with_status(status, today)
    if overdue:
        queryset = queryset.overdue(today)

    credits = list(queryset.order_by('due_date', 'credit_id'))
    for credit in credits:
        recompute_status(credit, today=today)
    return credits


def get_credit(credit_id: int, today: Optional[datetime.date] = None) -> Credit:
    """
    Get a credit with its derived status.

    The stored status is not touched.

    Raises:
        CreditNotFoundError: If credit doesn't exist
    """
    try:
        credit = Credit.objects.select_related('client').get(pk=credit_id)
    except Credit.DoesNotExist:
        raise CreditNotFoundError(f"Credit {credit_id} not found")
    return recompute_status(credit, today=today)


def get_credit_for_update(credit_id: int, *, using: str = DEFAULT_DB_ALIAS) -> Credit:
    """
    Lock-read a credit for the rest of the enclosing transaction.

    This is the only read used by payment-applying operations; a second
    caller on the same row blocks until the first commits or rolls back.

    Raises:
        TransactionManagementError: Called outside transaction.atomic(using)
        CreditNotFoundError: If credit doesn't exist
    """
    ensure_atomic(using, 'get_credit_for_update()')
    try:
        credit = (
            Credit.objects
            .using(using)
            .select_for_update()
            .get(pk=credit_id)
        )
    except Credit.DoesNotExist:
        raise CreditNotFoundError(f"Credit {credit_id} not found")

    credit.credit_amount = round2(credit.credit_amount)
    credit.amount_paid = round2(credit.amount_paid)
    return credit


@transaction.atomic
def update_credit(
    *,
    credit_id: int,
    data: Dict[str, Any],
    today: Optional[datetime.date] = None
) -> Credit:
    """
    Administrative update of a credit.

    Only client_id, sale_id, credit_amount, amount_paid and due_date are
    merged; a caller-supplied status is ignored and derived again.

    Raises:
        CreditNotFoundError: If credit doesn't exist
        CreditValidationError: If the merged values break the balance rules
    """
    try:
        credit = Credit.objects.select_for_update().get(pk=credit_id)
    except Credit.DoesNotExist:
        raise CreditNotFoundError(f"Credit {credit_id} not found")

    for field, value in data.items():
        if field in UPDATABLE_FIELDS:
            setattr(credit, field, value)

    if 'client_id' in data:
        _ensure_client(credit.client_id)
    if 'due_date' in data:
        credit.due_date = _coerce_due_date(credit.due_date)

    credit.credit_amount = round2(credit.credit_amount)
    credit.amount_paid = round2(credit.amount_paid)

    if credit.credit_amount < CENT:
        raise CreditValidationError('Credit amount must be at least 0.01')
    if exceeds_max_amount(credit.credit_amount):
        raise CreditValidationError(f"Credit amount must not exceed {MAX_AMOUNT}")
    if credit.amount_paid < ZERO:
        raise CreditValidationError('Amount paid cannot be negative')
    if credit.amount_paid > credit.credit_amount:
        raise CreditValidationError(
            f"Amount paid ({credit.amount_paid}) cannot exceed credit amount "
            f"({credit.credit_amount})"
        )

    recompute_status(credit, today=today)
    credit.save()
    logger.info(
        "Credit %s updated by admin: amount=%s paid=%s status=%s",
        credit.credit_id, credit.credit_amount, credit.amount_paid, credit.status,
    )
    return credit


@transaction.atomic
def delete_credit(*, credit_id: int) -> None:
    """
    Delete a credit. Its payments stay in the audit trail with no credit.

    Raises:
        CreditNotFoundError: If credit doesn't exist
    """
    try:
        credit = Credit.objects.select_for_update().get(pk=credit_id)
    except Credit.DoesNotExist:
        raise CreditNotFoundError(f"Credit {credit_id} not found")

    credit.delete()
    logger.warning("Credit %s deleted", credit_id)


@transaction.atomic
def refresh_stored_statuses(
    *,
    today: Optional[datetime.date] = None,
    dry_run: bool = False
) -> List[Tuple[Credit, str]]:
    """
    Persist the derived status of every credit whose stored value drifted.

    Pending credits become overdue once their due date passes without any
    write touching them; this brings the stored column back in line.

    Returns:
        (credit, previous_status) for every drifted credit
    """
    if today is None:
        today = timezone.localdate()

    drifted = []
    for credit in Credit.objects.select_for_update().order_by('credit_id'):
        previous = credit.status
        recompute_status(credit, today=today)
        if credit.status != previous:
            drifted.append((credit, previous))

    if drifted and not dry_run:
        now = timezone.now()
        for credit, _ in drifted:
            credit.updated_at = now
        Credit.objects.bulk_update(
            [credit for credit, _ in drifted],
            ['status', 'updated_at'],
        )
        logger.info("Refreshed stored status of %d credit(s)", len(drifted))

    return drifted
