from __future__ import annotations

from invoice_bridge import dependencies
from invoice_bridge.core.config import get_settings
from invoice_bridge.dependencies.config import get_app_settings, vendor_profile_from_settings


def test_exported_dependencies_are_providers() -> None:
    for name in dependencies.__all__:
        assert callable(getattr(dependencies, name)), name


def test_app_settings_dependency_returns_cached_settings() -> None:
    assert get_app_settings() is get_settings()


def test_vendor_profile_is_built_from_vendor_settings() -> None:
    settings = get_settings().model_copy(deep=True)
    settings.vendor.vendor_id = "V123"
    settings.vendor.consultant_name = "Jordan Lee"
    settings.vendor.email = "billing@acme.example"

    profile = vendor_profile_from_settings(settings)

    assert profile.vendor_id == "V123"
    assert profile.consultant_name == "Jordan Lee"
    assert profile.email == "billing@acme.example"
