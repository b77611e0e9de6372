"""Services for payments business logic."""

from .exceptions import (
    PaymentsServiceError,
    InvalidPaymentError,
    PaymentNotFoundError,
    PaymentMethodNotFoundError,
    DuplicatePaymentMethodError,
    CreditPaymentNotAllowedError,
)
from .recorder import (
    record_payment,
)
from .queries import (
    list_payments,
    get_payment,
    payments_for_credit,
    payments_by_method,
    payments_by_date_range,
    conciliation_report,
    payment_status_summary,
    recent_credit_payments,
    create_standalone_payment,
)
from .payment_methods import (
    create_payment_method,
    list_payment_methods,
    get_payment_method,
    update_payment_method,
)

__all__ = [
    # Exceptions
    'PaymentsServiceError',
    'InvalidPaymentError',
    'PaymentNotFoundError',
    'PaymentMethodNotFoundError',
    'DuplicatePaymentMethodError',
    'CreditPaymentNotAllowedError',
    # Recorder
    'record_payment',
    # Queries
    'list_payments',
    'get_payment',
    'payments_for_credit',
    'payments_by_method',
    'payments_by_date_range',
    'conciliation_report',
    'payment_status_summary',
    'recent_credit_payments',
    'create_standalone_payment',
    # Payment Methods
    'create_payment_method',
    'list_payment_methods',
    'get_payment_method',
    'update_payment_method',
]
