"""
Customers services - Business logic layer.

This package contains customer lookup/creation and per-customer sales
statistics.
"""

from .customer_management import (
    get_or_create_customer,
    get_customer_by_id,
    list_customers,
    get_customer_invoices,
    get_customer_stats,
)

from .exceptions import (
    CustomerServiceError,
    CustomerNotFoundError,
)

__all__ = [
    # Customer Management Services
    'get_or_create_customer',
    'get_customer_by_id',
    'list_customers',
    'get_customer_invoices',
    'get_customer_stats',
    # Exceptions
    'CustomerServiceError',
    'CustomerNotFoundError',
]
