"""Pytest configuration shared across the suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import pytest

try:
    from . import _bootstrap  # noqa: F401
except ImportError:  # pragma: no cover - fallback for rootdir-less runs
    import _bootstrap  # type: ignore # noqa: F401


class FakeKVStore:
    """In-memory stand-in for the credentials store that counts reads."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.values: Dict[str, str] = dict(initial or {})
        self.get_calls: list[str] = []

    def get(self, key: str) -> Optional[str]:
        self.get_calls.append(key)
        return self.values.get(key)

    def put(self, key: str, value: str) -> None:
        self.values[key] = value

    def delete(self, key: str) -> None:
        self.values.pop(key, None)


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def kv_store() -> FakeKVStore:
    return FakeKVStore()


@pytest.fixture
def future_expiry() -> datetime:
    return datetime.now(timezone.utc) + timedelta(hours=1)
