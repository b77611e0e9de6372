"""Helpers for functions that take an explicit database alias."""

from django.db import DEFAULT_DB_ALIAS, transaction
from django.db.transaction import TransactionManagementError


def ensure_atomic(using=DEFAULT_DB_ALIAS, operation='This operation'):
    """
    Refuse to continue unless the caller holds an open atomic block.

    Row locks taken with select_for_update() only last until the end of the
    surrounding transaction, so lock-reads and ledger inserts must never run
    in autocommit mode.
    """
    if not transaction.get_connection(using).in_atomic_block:
        raise TransactionManagementError(
            f"{operation} must run inside transaction.atomic(using={using!r})"
        )
