"""
Invoices services - Business logic layer.

This package contains all business operations for the invoices app:
- GST line-item calculation
- Payment split normalization
- Financial-year invoice numbering
- Invoice lifecycle (create, edit, soft delete)
- Payment summary and sales statistics
"""

from .gst_calculation import (
    LineItemCalculation,
    calculate_line_item,
    validate_line_item_input,
    round_money,
    round_to_rupee,
)

from .payment_split import (
    PaymentSplit,
    normalize_payment_split,
)

from .numbering import (
    financial_year_for,
    financial_year_label,
    allocate_invoice_number,
    peek_next_invoice_number,
)

from .invoice_management import (
    InvoiceTotals,
    build_line_items,
    compute_invoice_totals,
    create_invoice,
    get_invoice_by_id,
    list_invoices,
    update_invoice,
    soft_delete_invoice,
)

from .statistics import (
    get_payment_summary,
    get_sales_stats,
)

from .exceptions import (
    InvoiceServiceError,
    InvoiceValidationError,
    ComputationPreconditionError,
    InvoiceNotFoundError,
    InvoiceNumberConflictError,
)

__all__ = [
    # GST Calculation
    'LineItemCalculation',
    'calculate_line_item',
    'validate_line_item_input',
    'round_money',
    'round_to_rupee',
    # Payment Split
    'PaymentSplit',
    'normalize_payment_split',
    # Numbering
    'financial_year_for',
    'financial_year_label',
    'allocate_invoice_number',
    'peek_next_invoice_number',
    # Invoice Management
    'InvoiceTotals',
    'build_line_items',
    'compute_invoice_totals',
    'create_invoice',
    'get_invoice_by_id',
    'list_invoices',
    'update_invoice',
    'soft_delete_invoice',
    # Statistics
    'get_payment_summary',
    'get_sales_stats',
    # Exceptions
    'InvoiceServiceError',
    'InvoiceValidationError',
    'ComputationPreconditionError',
    'InvoiceNotFoundError',
    'InvoiceNumberConflictError',
]
