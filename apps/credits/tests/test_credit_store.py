"""
Service layer tests for the credit record store.

Tests cover:
- Status derivation
- Creation and administrative updates
- Filtered listing
- Locked reads and their transaction requirement
"""

import datetime
from decimal import Decimal

import pytest
from django.db import transaction
from django.db.transaction import TransactionManagementError

from apps.credits.models import Credit, CreditStatus
from apps.credits.services import (
    derive_status,
    recompute_status,
    create_credit,
    list_credits,
    get_credit,
    get_credit_for_update,
    update_credit,
    delete_credit,
    refresh_stored_statuses,
)
from apps.credits.services.exceptions import (
    CreditNotFoundError,
    CreditValidationError,
)
from apps.payments.models import Payment, PaymentType


TODAY = datetime.date(2024, 6, 15)
YESTERDAY = TODAY - datetime.timedelta(days=1)
TOMORROW = TODAY + datetime.timedelta(days=1)


# =============================================================================
# Status Derivation Tests
# =============================================================================

class TestDeriveStatus:
    """The paid/overdue/pending rule."""

    @pytest.mark.parametrize('due_date', [YESTERDAY, TODAY, TOMORROW])
    def test_fully_paid_is_paid_regardless_of_due_date(self, due_date):
        assert derive_status(Decimal('100'), Decimal('100'), due_date, TODAY) == CreditStatus.PAID

    def test_balance_past_due_is_overdue(self):
        assert derive_status(Decimal('100'), Decimal('40'), YESTERDAY, TODAY) == CreditStatus.OVERDUE

    def test_balance_due_in_future_is_pending(self):
        assert derive_status(Decimal('100'), Decimal('40'), TOMORROW, TODAY) == CreditStatus.PENDING

    def test_due_today_is_still_pending(self):
        assert derive_status(Decimal('100'), Decimal('40'), TODAY, TODAY) == CreditStatus.PENDING

    def test_compares_rounded_amounts(self):
        assert derive_status('100.004', '100.00', YESTERDAY, TODAY) == CreditStatus.PAID

    def test_string_amounts_from_storage(self):
        assert derive_status('200.00', '150.00', TOMORROW, TODAY) == CreditStatus.PENDING


class TestRecomputeStatus:

    def test_sets_status_in_memory_only(self):
        credit = Credit(
            credit_amount='100.00',
            amount_paid='40',
            due_date=YESTERDAY,
            status=CreditStatus.PENDING,
        )

        result = recompute_status(credit, today=TODAY)

        assert result is credit
        assert credit.status == CreditStatus.OVERDUE
        assert credit.amount_paid == Decimal('40.00')
        assert credit.credit_amount == Decimal('100.00')


# =============================================================================
# Credit Store Tests
# =============================================================================

@pytest.mark.django_db
class TestCreateCredit:
    """Tests for create_credit()."""

    def test_create_credit_success(self, customer):
        credit = create_credit(
            client_id=customer.pk,
            credit_amount='250.555',
            due_date=TOMORROW,
            sale_id=42,
        )

        credit.refresh_from_db()
        assert credit.credit_amount == Decimal('250.56')
        assert credit.amount_paid == Decimal('0.00')
        assert credit.status == CreditStatus.PENDING
        assert credit.sale_id == 42
        assert credit.client == customer

    def test_create_credit_accepts_iso_due_date(self, customer):
        credit = create_credit(client_id=customer.pk, credit_amount=10, due_date='2030-01-31')

        assert credit.due_date == datetime.date(2030, 1, 31)

    @pytest.mark.parametrize('amount', [0, '0.004', -5, None, 'abc'])
    def test_create_credit_rejects_amount_below_one_cent(self, customer, amount):
        with pytest.raises(CreditValidationError):
            create_credit(client_id=customer.pk, credit_amount=amount, due_date=TOMORROW)

        assert Credit.objects.count() == 0

    @pytest.mark.parametrize('amount', ['10000000000', '9999999999.995', '1e30', 1e300])
    def test_create_credit_rejects_amount_above_column_limit(self, customer, amount):
        with pytest.raises(CreditValidationError):
            create_credit(client_id=customer.pk, credit_amount=amount, due_date=TOMORROW)

        assert Credit.objects.count() == 0

    def test_create_credit_largest_amount(self, customer):
        credit = create_credit(client_id=customer.pk, credit_amount='9999999999.99', due_date=TOMORROW)

        credit.refresh_from_db()
        assert credit.credit_amount == Decimal('9999999999.99')

    def test_create_credit_smallest_amount(self, customer):
        credit = create_credit(client_id=customer.pk, credit_amount='0.005', due_date=TOMORROW)

        assert credit.credit_amount == Decimal('0.01')

    def test_create_credit_unknown_client(self, db):
        with pytest.raises(CreditValidationError, match='Client 999 not found'):
            create_credit(client_id=999, credit_amount=100, due_date=TOMORROW)

    def test_create_credit_invalid_due_date(self, customer):
        with pytest.raises(CreditValidationError):
            create_credit(client_id=customer.pk, credit_amount=100, due_date='tomorrow')


@pytest.mark.django_db
class TestListCredits:
    """Tests for list_credits()."""

    @pytest.fixture
    def ledger(self, customer):
        def make(amount, paid, due_date, status='pending'):
            return Credit.objects.create(
                client=customer,
                credit_amount=Decimal(amount),
                amount_paid=Decimal(paid),
                due_date=due_date,
                status=status,
            )

        return {
            'paid': make('100.00', '100.00', YESTERDAY, status='paid'),
            'overdue': make('100.00', '40.00', YESTERDAY - datetime.timedelta(days=10)),
            'pending': make('100.00', '40.00', TOMORROW),
        }

    def test_ordered_by_due_date(self, ledger):
        credits = list_credits(today=TODAY)

        due_dates = [credit.due_date for credit in credits]
        assert due_dates == sorted(due_dates)
        assert len(credits) == 3

    def test_status_recomputed_on_every_row(self, ledger):
        credits = {credit.credit_id: credit for credit in list_credits(today=TODAY)}

        # stored as pending, derived as overdue
        assert credits[ledger['overdue'].credit_id].status == CreditStatus.OVERDUE
        assert credits[ledger['pending'].credit_id].status == CreditStatus.PENDING
        assert credits[ledger['paid'].credit_id].status == CreditStatus.PAID

    def test_overdue_filter(self, ledger):
        credits = list_credits(overdue=True, today=TODAY)

        assert [c.credit_id for c in credits] == [ledger['overdue'].credit_id]

    @pytest.mark.parametrize('status', ['paid', 'overdue', 'pending'])
    def test_status_filter_uses_derived_status(self, ledger, status):
        credits = list_credits(status=status, today=TODAY)

        assert [c.credit_id for c in credits] == [ledger[status].credit_id]

    def test_unknown_status_filter(self, ledger):
        with pytest.raises(CreditValidationError):
            list_credits(status='cancelled', today=TODAY)

    def test_amounts_normalized(self, ledger):
        credit = list_credits(status='pending', today=TODAY)[0]

        assert isinstance(credit.amount_paid, Decimal)
        assert credit.amount_paid == Decimal('40.00')


@pytest.mark.django_db
class TestGetCredit:
    """Tests for get_credit()."""

    def test_get_credit_recomputes_without_persisting(self, make_credit):
        stored = make_credit(amount_paid='10.00', due_in_days=-3, status='pending')

        credit = get_credit(stored.credit_id)

        assert credit.status == CreditStatus.OVERDUE
        stored.refresh_from_db()
        assert stored.status == CreditStatus.PENDING

    def test_get_credit_not_found(self, db):
        with pytest.raises(CreditNotFoundError, match='Credit 12345 not found'):
            get_credit(12345)


@pytest.mark.django_db
class TestGetCreditForUpdate:
    """Tests for get_credit_for_update()."""

    def test_locks_inside_atomic_block(self, make_credit):
        credit = make_credit()

        with transaction.atomic():
            locked = get_credit_for_update(credit.credit_id, using='default')
        assert locked.credit_id == credit.credit_id

    @pytest.mark.django_db(transaction=True)
    def test_refuses_autocommit(self, make_credit):
        credit = make_credit()

        with pytest.raises(TransactionManagementError):
            get_credit_for_update(credit.credit_id, using='default')

    def test_not_found(self, db):
        with transaction.atomic():
            with pytest.raises(CreditNotFoundError):
                get_credit_for_update(999, using='default')

    def test_amounts_normalized(self, make_credit):
        credit = make_credit(credit_amount='80.50', amount_paid='0.50')

        with transaction.atomic():
            locked = get_credit_for_update(credit.credit_id)

        assert locked.credit_amount == Decimal('80.50')
        assert locked.amount_paid == Decimal('0.50')


@pytest.mark.django_db
class TestUpdateCredit:
    """Tests for update_credit()."""

    def test_update_recomputes_status(self, make_credit):
        credit = make_credit(credit_amount='100.00', amount_paid='0.00')

        updated = update_credit(credit_id=credit.credit_id, data={'amount_paid': '100'})

        assert updated.status == CreditStatus.PAID
        credit.refresh_from_db()
        assert credit.amount_paid == Decimal('100.00')
        assert credit.status == CreditStatus.PAID

    def test_caller_status_is_ignored(self, make_credit):
        credit = make_credit(amount_paid='0.00', due_in_days=10)

        updated = update_credit(credit_id=credit.credit_id, data={'status': 'paid'})

        assert updated.status == CreditStatus.PENDING

    def test_moving_due_date_into_past_makes_overdue(self, make_credit):
        credit = make_credit(amount_paid='20.00', due_in_days=10)

        updated = update_credit(
            credit_id=credit.credit_id,
            data={'due_date': YESTERDAY},
            today=TODAY,
        )

        assert updated.status == CreditStatus.OVERDUE

    def test_paid_above_amount_rejected(self, make_credit):
        credit = make_credit(credit_amount='100.00', amount_paid='50.00')

        with pytest.raises(CreditValidationError):
            update_credit(credit_id=credit.credit_id, data={'credit_amount': '40.00'})

        credit.refresh_from_db()
        assert credit.credit_amount == Decimal('100.00')

    def test_negative_paid_rejected(self, make_credit):
        credit = make_credit()

        with pytest.raises(CreditValidationError):
            update_credit(credit_id=credit.credit_id, data={'amount_paid': '-1'})

    def test_zero_amount_rejected(self, make_credit):
        credit = make_credit()

        with pytest.raises(CreditValidationError):
            update_credit(credit_id=credit.credit_id, data={'credit_amount': '0.001'})

    def test_amount_above_column_limit_rejected(self, make_credit):
        credit = make_credit(credit_amount='100.00')

        with pytest.raises(CreditValidationError):
            update_credit(credit_id=credit.credit_id, data={'credit_amount': '1e30'})

        credit.refresh_from_db()
        assert credit.credit_amount == Decimal('100.00')

    def test_change_client(self, make_credit, company_customer):
        credit = make_credit()

        updated = update_credit(credit_id=credit.credit_id, data={'client_id': company_customer.pk})

        assert updated.client_id == company_customer.pk

    def test_change_to_unknown_client(self, make_credit):
        credit = make_credit()

        with pytest.raises(CreditValidationError):
            update_credit(credit_id=credit.credit_id, data={'client_id': 999})

    def test_update_not_found(self, db):
        with pytest.raises(CreditNotFoundError):
            update_credit(credit_id=999, data={'sale_id': 1})


@pytest.mark.django_db
class TestDeleteCredit:

    def test_delete_keeps_payments(self, make_credit):
        credit = make_credit()
        payment = Payment.objects.create(
            amount=Decimal('10.00'),
            payment_type=PaymentType.CREDIT,
            credit=credit,
        )

        delete_credit(credit_id=credit.credit_id)

        assert not Credit.objects.filter(pk=credit.pk).exists()
        payment.refresh_from_db()
        assert payment.credit_id is None

    def test_delete_not_found(self, db):
        with pytest.raises(CreditNotFoundError):
            delete_credit(credit_id=999)


@pytest.mark.django_db
class TestRefreshStoredStatuses:

    def test_refresh_updates_drifted_rows(self, customer):
        stale = Credit.objects.create(
            client=customer,
            credit_amount=Decimal('100.00'),
            due_date=YESTERDAY,
            status=CreditStatus.PENDING,
        )
        fresh = Credit.objects.create(
            client=customer,
            credit_amount=Decimal('100.00'),
            due_date=TOMORROW,
            status=CreditStatus.PENDING,
        )

        drifted = refresh_stored_statuses(today=TODAY)

        assert [(c.credit_id, previous) for c, previous in drifted] == [
            (stale.credit_id, CreditStatus.PENDING)
        ]
        stale.refresh_from_db()
        fresh.refresh_from_db()
        assert stale.status == CreditStatus.OVERDUE
        assert fresh.status == CreditStatus.PENDING

    def test_dry_run_changes_nothing(self, customer):
        stale = Credit.objects.create(
            client=customer,
            credit_amount=Decimal('100.00'),
            due_date=YESTERDAY,
            status=CreditStatus.PENDING,
        )

        drifted = refresh_stored_statuses(today=TODAY, dry_run=True)

        assert len(drifted) == 1
        stale.refresh_from_db()
        assert stale.status == CreditStatus.PENDING
