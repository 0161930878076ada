"""
Domain models for OAuth token persistence.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class TokenPair(BaseModel):
    """The single access/refresh token bundle held for the FreshBooks account."""

    access_token: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)
    expires_at: datetime

    @field_validator("expires_at", mode="before")
    @classmethod
    def _parse_expiry(cls, value: Any) -> Any:
        # Older records stored epoch milliseconds.
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        return value

    @field_validator("expires_at")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def from_token_response(
        cls, payload: Dict[str, Any], *, now: Optional[datetime] = None
    ) -> "TokenPair":
        """Build a pair from the token endpoint's JSON response."""
        issued_at = now or datetime.now(timezone.utc)
        created_at = payload.get("created_at")
        if isinstance(created_at, (int, float)):
            issued_at = datetime.fromtimestamp(created_at, tz=timezone.utc)
        expires_in = int(payload.get("expires_in") or 0)
        return cls(
            access_token=payload.get("access_token") or "",
            refresh_token=payload.get("refresh_token") or "",
            expires_at=issued_at + timedelta(seconds=expires_in),
        )

    def is_expired(self, *, leeway: timedelta = timedelta(0)) -> bool:
        return self.expires_at <= datetime.now(timezone.utc) + leeway


__all__ = ["TokenPair"]
