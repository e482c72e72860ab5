"""OAuth2 client-credentials exchange.

Every call to ``acquire()`` performs a fresh token exchange. Sessions are
not cached or refreshed: each tool invocation gets its own access token and
throws it away afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

from app.config import Settings
from app.errors import AuthError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionDescriptor:
    """Short-lived handle to an authenticated Salesforce org."""

    instance_url: str
    access_token: str = field(repr=False)


class CredentialProvider:
    """Exchanges the configured client id/secret for a SessionDescriptor.

    Parameters
    ----------
    settings : Settings
        Supplies the token endpoint, client credentials and timeout.
    transport : httpx.AsyncBaseTransport | None
        Optional transport override, used by tests to stand in for the
        token endpoint.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token_url = settings.sfdc_token_url
        self._client_id = settings.sfdc_client_id
        self._client_secret = settings.sfdc_client_secret
        self._timeout = settings.sfdc_http_timeout_seconds
        self._transport = transport

    async def acquire(self) -> SessionDescriptor:
        form = {
            "grant_type": "client_credentials",
            "client_id": self._client_id,
            "client_secret": self._client_secret.get_secret_value(),
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as http:
                resp = await http.post(self._token_url, data=form)
        except httpx.HTTPError as e:
            raise AuthError(f"Salesforce token request failed: {e}") from e

        if not resp.is_success:
            raise AuthError(
                f"Salesforce token error: {resp.status_code} {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise AuthError(
                f"Salesforce token endpoint returned non-JSON body: {resp.text[:200]}",
                status_code=resp.status_code,
                body=resp.text,
            ) from e

        access_token = data.get("access_token") if isinstance(data, dict) else None
        instance_url = data.get("instance_url") if isinstance(data, dict) else None
        if not access_token or not instance_url:
            raise AuthError(
                "Salesforce token response is missing access_token or instance_url",
                status_code=resp.status_code,
            )

        logger.debug("Acquired Salesforce session for %s", instance_url)
        return SessionDescriptor(
            instance_url=instance_url.rstrip("/"),
            access_token=access_token,
        )
