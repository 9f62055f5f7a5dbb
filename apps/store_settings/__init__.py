"""
Store Settings App - Shop-wide key/value configuration.

Holds the defaults the invoicing flow reads at creation time:
- cash_gst_mode / online_gst_mode: GST mode applied when an invoice omits one
- invoice_series_start: first sequence number of a financial year
"""
