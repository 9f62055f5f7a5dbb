"""
Invoices App - GST invoicing for a retail counter.

Key Features:
- Line-item GST calculation in inclusive and exclusive modes (CGST/SGST split)
- Cash / Online / Cash+Card payment split reconciliation
- Financial-year scoped invoice numbering (FY25-26/001)
- Create / edit / soft-delete lifecycle with an immutable GST mode
- Payment summary and sales statistics for daily cash reconciliation

Architecture:
- Models: Invoice, InvoiceItem, InvoiceSequence
- Services: gst_calculation, payment_split, numbering, invoice_management, statistics
- Views: DRF ViewSet with reporting actions
"""
