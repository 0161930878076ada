"""Test helper that normalizes sys.path and environment defaults."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


_DEFAULT_ENV_VARS: dict[str, str] = {
    "FRESHBOOKS_CLIENT_ID": "test-client-id",
    "FRESHBOOKS_CLIENT_SECRET": "test-client-secret",
    "FRESHBOOKS_ACCOUNT_ID": "test-account-id",
    "OAUTH_REDIRECT_URI": "https://example.com/oauth/callback",
    "FRESHBOOKS_WEBHOOK_URL": "https://hooks.example.com",
    "FRESHBOOKS_WEBHOOK_SECRET": "test-webhook-secret",
    "FRESHBOOKS_WEBHOOK_CALLBACK_ID": "827106",
    "TOKEN_STORE_DB_PATH": str(Path(tempfile.gettempdir()) / "invoice-bridge-tests.db"),
}

for key, value in _DEFAULT_ENV_VARS.items():
    os.environ.setdefault(key, value)
