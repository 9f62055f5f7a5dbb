"""
API exceptions for invoices app.

Service-layer errors live in ``services/exceptions.py``; views translate them
into these (or DRF's ValidationError) so the HTTP status is right.
"""
from rest_framework.exceptions import APIException


class InvoiceNotFound(APIException):
    """Invoice not found or deleted."""
    status_code = 404
    default_detail = 'Invoice not found.'
    default_code = 'invoice_not_found'


class InvoiceNumberConflict(APIException):
    """Invoice number could not be allocated without a collision."""
    status_code = 409
    default_detail = 'Invoice number is already in use, please retry.'
    default_code = 'invoice_number_conflict'
