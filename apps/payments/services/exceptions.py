"""Domain-specific exceptions for payments services."""


class PaymentsServiceError(Exception):
    """Base exception for payments services."""
    pass


class InvalidPaymentError(PaymentsServiceError):
    """Raised when payment data is malformed (e.g. non-positive amount)."""
    pass


class PaymentNotFoundError(PaymentsServiceError):
    """Raised when payment does not exist."""
    pass


class PaymentMethodNotFoundError(PaymentsServiceError):
    """Raised when payment method does not exist."""
    pass


class DuplicatePaymentMethodError(PaymentsServiceError):
    """Raised when a payment method name is already taken."""
    pass


class CreditPaymentNotAllowedError(PaymentsServiceError):
    """Raised when a credit payment bypasses the credit ledger."""
    pass
