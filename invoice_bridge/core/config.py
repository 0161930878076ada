"""
Application configuration models and helpers.

Centralizes settings management so the webhook service and the maintenance
scripts share one configuration surface. Every value is a plain string read
once from the environment (or a ``.env`` file) at process start.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()

_GROUP_CONFIG = SettingsConfigDict(populate_by_name=True, extra="ignore")


class FreshBooksSettings(BaseSettings):
    """OAuth and webhook configuration for the FreshBooks account."""

    model_config = _GROUP_CONFIG

    client_id: str = Field(..., alias="FRESHBOOKS_CLIENT_ID")
    client_secret: str = Field(..., alias="FRESHBOOKS_CLIENT_SECRET")
    account_id: str = Field(..., alias="FRESHBOOKS_ACCOUNT_ID")
    redirect_uri: str = Field(..., alias="OAUTH_REDIRECT_URI")
    webhook_url: Optional[str] = Field(
        None,
        alias="FRESHBOOKS_WEBHOOK_URL",
        description="Public base URL FreshBooks should deliver webhooks to.",
    )
    webhook_secret: Optional[str] = Field(
        None,
        alias="FRESHBOOKS_WEBHOOK_SECRET",
        description="Shared secret used to sign webhook payloads.",
    )
    webhook_callback_id: Optional[str] = Field(
        None,
        alias="FRESHBOOKS_WEBHOOK_CALLBACK_ID",
        description="Identifier of the registered callback awaiting verification.",
    )

    @field_validator("webhook_url")
    @classmethod
    def _strip_trailing_slash(cls, value: Optional[str]) -> Optional[str]:
        return value.rstrip("/") if value else value


class KforceSettings(BaseSettings):
    """Settings that scope processing to the Kforce customer."""

    model_config = _GROUP_CONFIG

    customer_id: Optional[str] = Field(
        None,
        alias="KFORCE_CUSTOMER_ID",
        description="Only invoices for this FreshBooks customer are converted.",
    )


class VendorSettings(BaseSettings):
    """Vendor identity written into every Kforce CSV row."""

    model_config = _GROUP_CONFIG

    vendor_id: str = Field("", alias="VENDOR_INFO_VENDOR_ID")
    vendor_name: str = Field("", alias="VENDOR_INFO_VENDOR_NAME")
    address: str = Field("", alias="VENDOR_INFO_ADDRESS")
    city: str = Field("", alias="VENDOR_INFO_CITY")
    state: str = Field("", alias="VENDOR_INFO_STATE")
    zip: str = Field("", alias="VENDOR_INFO_ZIP")
    consultant_id: str = Field("", alias="VENDOR_INFO_CONSULTANT_ID")
    consultant_name: str = Field("", alias="VENDOR_INFO_CONSULTANT_NAME")
    contact_name: str = Field("", alias="VENDOR_INFO_CONTACT_NAME")
    phone: str = Field("", alias="VENDOR_INFO_PHONE")
    email: str = Field("", alias="VENDOR_INFO_EMAIL")


class EmailSettings(BaseSettings):
    """Addresses used when delivering the generated CSV."""

    model_config = _GROUP_CONFIG

    client_email: Optional[str] = Field(None, alias="CLIENT_EMAIL")
    sender_email: Optional[str] = Field(None, alias="SENDER_EMAIL")
    api_key: Optional[str] = Field(None, alias="EMAIL_API_KEY")


class SecuritySettings(BaseSettings):
    """Security-related configuration."""

    model_config = _GROUP_CONFIG

    token_encryption_secret: Optional[str] = Field(
        None,
        alias="TOKEN_ENCRYPTION_SECRET",
        description=(
            "Secret used to derive the symmetric key for encrypting stored tokens. "
            "Tokens are stored as plain JSON when omitted."
        ),
    )


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    environment: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="APP_LOG_LEVEL")
    token_store_db_path: str = Field(
        "data/credentials.db",
        alias="TOKEN_STORE_DB_PATH",
        description="SQLite file backing the credentials key-value store.",
    )
    freshbooks: FreshBooksSettings = Field(default_factory=FreshBooksSettings)
    kforce: KforceSettings = Field(default_factory=KforceSettings)
    vendor: VendorSettings = Field(default_factory=VendorSettings)
    email: EmailSettings = Field(default_factory=EmailSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "EmailSettings",
    "FreshBooksSettings",
    "KforceSettings",
    "SecuritySettings",
    "VendorSettings",
    "get_settings",
]
