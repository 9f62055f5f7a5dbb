"""Domain exceptions for store_settings app."""


class SettingsServiceError(Exception):
    """Base exception for all settings service errors."""
    pass


class InvalidSettingError(SettingsServiceError):
    """Setting key or value is not acceptable."""
    pass
