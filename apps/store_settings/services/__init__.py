"""
Store settings services - Business logic layer.

This package contains the key/value settings operations and the
InvoiceConfig snapshot handed to invoice creation.
"""

from .settings_management import (
    InvoiceConfig,
    SETTING_DEFAULTS,
    get_setting,
    set_setting,
    list_settings,
    get_invoice_config,
)

from .exceptions import (
    SettingsServiceError,
    InvalidSettingError,
)

__all__ = [
    # Settings Management Services
    'InvoiceConfig',
    'SETTING_DEFAULTS',
    'get_setting',
    'set_setting',
    'list_settings',
    'get_invoice_config',
    # Exceptions
    'SettingsServiceError',
    'InvalidSettingError',
]
