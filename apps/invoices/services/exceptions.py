"""Domain exceptions for invoices app."""


class InvoiceServiceError(Exception):
    """Base exception for all invoice service errors."""
    pass


class InvoiceValidationError(InvoiceServiceError):
    """Required invoice fields are missing or malformed."""
    pass


class ComputationPreconditionError(InvoiceValidationError):
    """Line item input is outside what the GST calculator accepts."""
    pass


class InvoiceNotFoundError(InvoiceServiceError):
    """Invoice does not exist or has been deleted."""
    pass


class InvoiceNumberConflictError(InvoiceServiceError):
    """Allocated invoice number is already taken."""

    def __init__(self, invoice_number, message=None):
        self.invoice_number = invoice_number
        super().__init__(message or f"Invoice number {invoice_number} is already in use")
