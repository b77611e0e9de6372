"""Payment method configuration."""

from typing import Any, Dict, List

from django.db import transaction

from ..models import PaymentMethod
from .exceptions import (
    DuplicatePaymentMethodError,
    InvalidPaymentError,
    PaymentMethodNotFoundError,
)


@transaction.atomic
def create_payment_method(
    *,
    name: str,
    description: str = '',
    is_active: bool = True
) -> PaymentMethod:
    """
    Raises:
        InvalidPaymentError: If name is blank
        DuplicatePaymentMethodError: If name is already used
    """
    name = (name or '').strip()
    if not name:
        raise InvalidPaymentError('Payment method name is required')
    if PaymentMethod.objects.filter(name__iexact=name).exists():
        raise DuplicatePaymentMethodError(f"Payment method '{name}' already exists")

    return PaymentMethod.objects.create(
        name=name,
        description=description,
        is_active=is_active,
    )


def list_payment_methods(*, active_only: bool = False) -> List[PaymentMethod]:
    queryset = PaymentMethod.objects.all()
    if active_only:
        queryset = queryset.filter(is_active=True)
    return list(queryset.order_by('name'))


@transaction.atomic
def update_payment_method(
    *,
    payment_method_id: int,
    data: Dict[str, Any]
) -> PaymentMethod:
    """
    Update name, description or is_active of a payment method.

    Raises:
        PaymentMethodNotFoundError: If payment method doesn't exist
        DuplicatePaymentMethodError: If the new name is already used
    """
    try:
        method = PaymentMethod.objects.select_for_update().get(pk=payment_method_id)
    except PaymentMethod.DoesNotExist:
        raise PaymentMethodNotFoundError(f"Payment method {payment_method_id} not found")

    if 'name' in data:
        name = (data['name'] or '').strip()
        if not name:
            raise InvalidPaymentError('Payment method name is required')
        taken = (
            PaymentMethod.objects
            .filter(name__iexact=name)
            .exclude(pk=method.pk)
            .exists()
        )
        if taken:
            raise DuplicatePaymentMethodError(f"Payment method '{name}' already exists")
        method.name = name

    for field in ('description', 'is_active'):
        if field in data:
            setattr(method, field, data[field])

    method.save()
    return method


def get_payment_method(payment_method_id: int) -> PaymentMethod:
    """
    Raises:
        PaymentMethodNotFoundError: If payment method doesn't exist
    """
    try:
        return PaymentMethod.objects.get(pk=payment_method_id)
    except PaymentMethod.DoesNotExist:
        raise PaymentMethodNotFoundError(f"Payment method {payment_method_id} not found")
