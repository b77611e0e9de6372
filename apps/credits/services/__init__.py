"""Services for the credit ledger."""

from .exceptions import (
    CreditsServiceError,
    CreditValidationError,
    InvalidAmountError,
    CreditNotFoundError,
    ExceedsBalanceError,
    LedgerStorageError,
)
from .credit_store import (
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
from .payment_transactions import (
    merge_bulk_items,
    pay_credit,
    pay_credits_bulk,
)
from .dashboard import (
    overdue_credits,
    dashboard_counts,
    credits_for_dashboard,
)

__all__ = [
    # Exceptions
    'CreditsServiceError',
    'CreditValidationError',
    'InvalidAmountError',
    'CreditNotFoundError',
    'ExceedsBalanceError',
    'LedgerStorageError',
    # Credit Store
    'derive_status',
    'recompute_status',
    'create_credit',
    'list_credits',
    'get_credit',
    'get_credit_for_update',
    'update_credit',
    'delete_credit',
    'refresh_stored_statuses',
    # Payment Transactions
    'merge_bulk_items',
    'pay_credit',
    'pay_credits_bulk',
    # Dashboard
    'overdue_credits',
    'dashboard_counts',
    'credits_for_dashboard',
]
