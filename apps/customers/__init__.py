"""
Customers App - Repeat-customer tracking.

Customers are created implicitly from invoices (name + phone) and carry a
sequential CUST-0001 style code. Order counts and spend are derived from
non-deleted invoices.
"""
