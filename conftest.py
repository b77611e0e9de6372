"""Fixtures shared by every app's test suite."""

import datetime
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, UserRole
from apps.clients.models import Client
from apps.credits.models import Credit
from apps.payments.models import PaymentMethod


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def today():
    return timezone.localdate()


@pytest.fixture
def seller(db):
    """Create and return a seller (cashier) account."""
    return User.objects.create_user(
        username='seller',
        password='TestPass123!',
        full_name='Sam Seller',
        role=UserRole.SELLER,
    )


@pytest.fixture
def admin_user(db):
    """Create and return a ledger admin account."""
    return User.objects.create_user(
        username='admin',
        password='TestPass123!',
        full_name='Ada Admin',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def seller_client(seller):
    """Return an API client authenticated as the seller using JWT."""
    return _client_for(seller)


@pytest.fixture
def admin_client(admin_user):
    """Return an API client authenticated as the admin using JWT."""
    return _client_for(admin_user)


@pytest.fixture
def customer(db):
    """Create and return a credit client."""
    return Client.objects.create(
        first_name='Rosa',
        last_name='Quispe',
        document_number='45678912',
        phone='987654321',
    )


@pytest.fixture
def company_customer(db):
    return Client.objects.create(
        company_name='Transportes Andinos SAC',
        document_number='20123456789',
    )


@pytest.fixture
def cash(db):
    """Create and return the cash payment method."""
    return PaymentMethod.objects.create(name='Cash')


@pytest.fixture
def make_credit(customer, today):
    """Factory for credits stored directly, bypassing the ledger services."""

    def _make(credit_amount='100.00', amount_paid='0.00', due_in_days=30, status='pending', client=None):
        return Credit.objects.create(
            client=client or customer,
            credit_amount=Decimal(credit_amount),
            amount_paid=Decimal(amount_paid),
            due_date=today + datetime.timedelta(days=due_in_days),
            status=status,
        )

    return _make
