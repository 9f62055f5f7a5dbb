"""Settings management service - key/value store and invoice defaults."""

import logging
from dataclasses import dataclass
from typing import Optional

from django.db import transaction

from apps.invoices.models import GstMode
from apps.store_settings.models import Setting
from .exceptions import InvalidSettingError

logger = logging.getLogger(__name__)


CASH_GST_MODE = 'cash_gst_mode'
ONLINE_GST_MODE = 'online_gst_mode'
INVOICE_SERIES_START = 'invoice_series_start'

SETTING_DEFAULTS = {
    CASH_GST_MODE: GstMode.INCLUSIVE.value,
    ONLINE_GST_MODE: GstMode.EXCLUSIVE.value,
    INVOICE_SERIES_START: '1',
}


@dataclass(frozen=True)
class InvoiceConfig:
    """Configuration snapshot passed explicitly into invoice creation."""

    cash_gst_mode: str = GstMode.INCLUSIVE.value
    online_gst_mode: str = GstMode.EXCLUSIVE.value
    series_start: int = 1


def _validate(key: str, value: str) -> str:
    if key in (CASH_GST_MODE, ONLINE_GST_MODE):
        if value not in GstMode.values:
            raise InvalidSettingError(
                f"{key} must be one of: {', '.join(GstMode.values)}"
            )
    elif key == INVOICE_SERIES_START:
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise InvalidSettingError(f"{key} must be a whole number")
        if number < 1:
            raise InvalidSettingError(f"{key} must be at least 1")
        value = str(number)
    return value


def get_setting(key: str) -> Optional[str]:
    """
    Return the stored value for a key, falling back to its default.

    Unknown keys without a stored row return None.
    """
    setting = Setting.objects.filter(key=key).first()
    if setting is not None:
        return setting.value
    return SETTING_DEFAULTS.get(key)


@transaction.atomic
def set_setting(*, key: str, value) -> Setting:
    """
    Create or update a setting.

    Known keys are validated (GST modes must be inclusive/exclusive, the
    series start a positive integer). Other keys are stored as given.

    Raises:
        InvalidSettingError: If the key is blank or the value is invalid
    """
    key = (key or '').strip()
    if not key:
        raise InvalidSettingError("Setting key is required")
    if value is None:
        raise InvalidSettingError(f"{key} requires a value")

    value = _validate(key, str(value).strip())

    setting, created = Setting.objects.select_for_update().update_or_create(
        key=key,
        defaults={'value': value},
    )
    logger.info("Setting %s %s to %r", key, 'created' if created else 'updated', value)
    return setting


def list_settings() -> dict:
    """Stored settings merged over the defaults."""
    values = dict(SETTING_DEFAULTS)
    values.update(Setting.objects.values_list('key', 'value'))
    return values


def get_invoice_config() -> InvoiceConfig:
    """
    Build the InvoiceConfig used by invoice creation and numbering.

    A stored value that no longer validates (e.g. edited through the admin)
    is ignored in favour of the default.
    """
    values = list_settings()
    resolved = {}
    for key in (CASH_GST_MODE, ONLINE_GST_MODE, INVOICE_SERIES_START):
        try:
            resolved[key] = _validate(key, values[key])
        except InvalidSettingError:
            logger.warning("Ignoring invalid stored setting %s=%r", key, values[key])
            resolved[key] = SETTING_DEFAULTS[key]

    return InvoiceConfig(
        cash_gst_mode=resolved[CASH_GST_MODE],
        online_gst_mode=resolved[ONLINE_GST_MODE],
        series_start=int(resolved[INVOICE_SERIES_START]),
    )
