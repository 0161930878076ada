"""
FreshBooks OAuth utilities.

These helpers build the consent redirect and exchange authorization codes and
refresh tokens for a ``TokenPair``.
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode, urlsplit

import httpx
from pydantic import ValidationError

from invoice_bridge.models.oauth import TokenPair

logger = logging.getLogger(__name__)

# Development tunnels only serve plain http locally; FreshBooks requires https.
DEV_TUNNEL_HOST_SUFFIX = ".trycloudflare.com"


class RedirectURIError(ValueError):
    """Raised when the configured redirect URI is not acceptable to FreshBooks."""


class OAuthTokenExchangeError(Exception):
    """Raised when the token endpoint fails or returns an error."""


def _normalize_redirect_uri(redirect_uri: str) -> str:
    parts = urlsplit(redirect_uri)
    if parts.scheme == "https":
        return redirect_uri
    hostname = parts.hostname or ""
    if parts.scheme == "http" and hostname.endswith(DEV_TUNNEL_HOST_SUFFIX):
        return parts._replace(scheme="https").geturl()
    raise RedirectURIError("Redirect URI must use HTTPS")


class FreshBooksOAuthClient:
    """Build FreshBooks authorization URLs and exchange codes for tokens."""

    AUTH_BASE_URL = "https://auth.freshbooks.com/oauth/authorize"
    TOKEN_URL = "https://api.freshbooks.com/auth/oauth/token"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = _normalize_redirect_uri(redirect_uri)
        self._transport = transport

    @property
    def redirect_uri(self) -> str:
        return self._redirect_uri

    def get_authorization_url(self) -> str:
        """Construct the FreshBooks consent URL."""
        params = {
            "client_id": self._client_id,
            "response_type": "code",
            "redirect_uri": self._redirect_uri,
        }
        return f"{self.AUTH_BASE_URL}?{urlencode(params)}"

    async def _post_token_request(self, payload: dict, failure_message: str) -> TokenPair:
        try:
            async with httpx.AsyncClient(timeout=10.0, transport=self._transport) as client:
                response = await client.post(self.TOKEN_URL, json=payload)
        except httpx.HTTPError as exc:
            logger.warning(
                "FreshBooks token request failed for %s: %s", payload["grant_type"], exc
            )
            raise OAuthTokenExchangeError(failure_message) from exc

        if not response.is_success:
            logger.warning(
                "FreshBooks token endpoint returned %s for %s",
                response.status_code,
                payload["grant_type"],
            )
            raise OAuthTokenExchangeError(failure_message)

        try:
            return TokenPair.from_token_response(response.json())
        except (ValueError, ValidationError) as exc:
            raise OAuthTokenExchangeError(
                "Incomplete token payload returned from FreshBooks."
            ) from exc

    async def exchange_code_for_token(self, code: str) -> TokenPair:
        """Exchange an authorization code for a new token pair."""
        payload = {
            "grant_type": "authorization_code",
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "code": code,
            "redirect_uri": self._redirect_uri,
        }
        return await self._post_token_request(payload, "Failed to exchange code for token")

    async def refresh_access_token(self, refresh_token: str) -> TokenPair:
        """Refresh the access token using a stored refresh token."""
        payload = {
            "grant_type": "refresh_token",
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "refresh_token": refresh_token,
        }
        return await self._post_token_request(payload, "Failed to refresh access token")


__all__ = [
    "DEV_TUNNEL_HOST_SUFFIX",
    "FreshBooksOAuthClient",
    "OAuthTokenExchangeError",
    "RedirectURIError",
]
