"""
FastAPI dependencies exposing configuration and values derived from it.
"""

from invoice_bridge.core.config import AppSettings, get_settings
from invoice_bridge.schemas import VendorProfile


def get_app_settings() -> AppSettings:
    """FastAPI dependency returning the process-wide settings."""
    return get_settings()


def vendor_profile_from_settings(settings: AppSettings) -> VendorProfile:
    """Vendor identity for CSV rows, taken from the ``VENDOR_INFO_*`` values."""
    return VendorProfile(**settings.vendor.model_dump())


__all__ = ["get_app_settings", "vendor_profile_from_settings"]
