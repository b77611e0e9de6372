"""Domain-specific exceptions for the credit ledger."""


class CreditsServiceError(Exception):
    """Base exception for credit ledger services."""
    pass


class CreditValidationError(CreditsServiceError):
    """Raised for malformed input, always before a transaction opens."""
    pass


class InvalidAmountError(CreditValidationError):
    """Raised when a payment amount does not round to a positive value."""
    pass


class CreditNotFoundError(CreditsServiceError):
    """Raised when credit does not exist."""
    pass


class ExceedsBalanceError(CreditsServiceError):
    """Raised when a payment is larger than the remaining balance."""

    def __init__(self, message, *, credit_id, amount, balance):
        super().__init__(message)
        self.credit_id = credit_id
        self.amount = amount
        self.balance = balance


class LedgerStorageError(CreditsServiceError):
    """Raised when the database fails inside a payment transaction."""
    pass
