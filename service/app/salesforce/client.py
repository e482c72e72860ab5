"""Salesforce REST API facade.

Thin async wrapper over the REST endpoints the tools need: query, sObject
retrieve/create/update, and the OpenID userinfo endpoint. One instance is
opened per tool invocation and closed when it finishes — connections are
never pooled across requests.

Create and update report business-rule failures (validation rules, required
fields, bad picklist values) as structured results instead of raising, so
operations can hand the backend's message straight back to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from app.errors import (
    AuthError,
    BackendNotFoundError,
    BackendQueryError,
    BackendUnavailableError,
)
from app.salesforce.auth import SessionDescriptor

logger = logging.getLogger(__name__)

_DEFAULT_API_VERSION = "60.0"
_DEFAULT_MAX_RECORDS = 2000


@dataclass(frozen=True, slots=True)
class CreateResult:
    id: str | None
    success: bool
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class UpdateResult:
    success: bool
    errors: list[str] = field(default_factory=list)


def format_errors(payload: Any) -> list[str]:
    """Flatten a Salesforce error payload into readable messages.

    The REST API returns ``[{"errorCode": ..., "message": ...}, ...]`` for
    most failures; the OAuth endpoints use ``{"error", "error_description"}``.
    Anything else is stringified as-is.
    """
    if payload is None or payload == "":
        return []

    if isinstance(payload, dict):
        if "error" in payload:
            desc = payload.get("error_description")
            return [f"{payload['error']}: {desc}" if desc else str(payload["error"])]
        payload = [payload]

    if not isinstance(payload, list):
        return [str(payload)]

    messages: list[str] = []
    for item in payload:
        if isinstance(item, dict):
            code = item.get("errorCode") or item.get("statusCode")
            message = item.get("message", "")
            fields = item.get("fields")
            text = f"{code}: {message}" if code else str(message or item)
            if fields:
                text += f" (fields: {', '.join(fields)})"
            messages.append(text)
        else:
            messages.append(str(item))
    return messages


def _error_detail(resp: httpx.Response) -> list[str]:
    try:
        return format_errors(resp.json())
    except ValueError:
        return [resp.text] if resp.text else []


class SalesforceClient:
    """Per-invocation client bound to one SessionDescriptor.

    Use as an async context manager::

        async with SalesforceClient(session) as client:
            records = await client.query("SELECT Id FROM Case LIMIT 1")
    """

    def __init__(
        self,
        session: SessionDescriptor,
        *,
        api_version: str = _DEFAULT_API_VERSION,
        timeout: float = 30.0,
        max_records: int = _DEFAULT_MAX_RECORDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session = session
        self._api_version = api_version
        self._timeout = timeout
        self._max_records = max_records
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    @property
    def data_url(self) -> str:
        return f"/services/data/v{self._api_version}"

    async def __aenter__(self) -> SalesforceClient:
        self._http = httpx.AsyncClient(
            base_url=self._session.instance_url,
            headers={
                "Authorization": f"Bearer {self._session.access_token}",
                "Accept": "application/json",
            },
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        if self._http is None:
            raise RuntimeError("SalesforceClient used outside of 'async with'")

        try:
            resp = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise BackendUnavailableError(
                f"Salesforce request failed: {method} {url}: {e}"
            ) from e

        if resp.status_code == 401:
            raise AuthError(
                "Salesforce rejected the session: " + "; ".join(_error_detail(resp)),
                status_code=401,
                body=resp.text,
            )
        if resp.status_code >= 500:
            raise BackendUnavailableError(
                f"Salesforce returned {resp.status_code}: "
                + "; ".join(_error_detail(resp)),
                status_code=resp.status_code,
            )
        return resp

    async def query(self, soql: str) -> list[dict[str, Any]]:
        """Run a SOQL query, following nextRecordsUrl up to max_records."""
        resp = await self._request("GET", f"{self.data_url}/query", params={"q": soql})
        if not resp.is_success:
            raise BackendQueryError(
                "; ".join(_error_detail(resp)) or f"Query failed ({resp.status_code})",
                status_code=resp.status_code,
            )

        body = resp.json()
        records: list[dict[str, Any]] = list(body.get("records", []))

        while not body.get("done", True) and len(records) < self._max_records:
            next_url = body.get("nextRecordsUrl")
            if not next_url:
                break
            resp = await self._request("GET", next_url)
            if not resp.is_success:
                raise BackendQueryError(
                    "; ".join(_error_detail(resp)) or f"Query failed ({resp.status_code})",
                    status_code=resp.status_code,
                )
            body = resp.json()
            records.extend(body.get("records", []))

        if len(records) > self._max_records:
            logger.info(
                "Query returned more than %d records; truncating", self._max_records
            )
            records = records[: self._max_records]
        return records

    async def retrieve(self, object_type: str, record_id: str) -> dict[str, Any]:
        resp = await self._request(
            "GET", f"{self.data_url}/sobjects/{object_type}/{record_id}"
        )
        if resp.status_code == 404:
            raise BackendNotFoundError(
                f"{object_type} not found: {record_id}", status_code=404
            )
        if not resp.is_success:
            raise BackendQueryError(
                "; ".join(_error_detail(resp)) or f"Retrieve failed ({resp.status_code})",
                status_code=resp.status_code,
            )
        return resp.json()

    async def create(self, object_type: str, fields: dict[str, Any]) -> CreateResult:
        resp = await self._request(
            "POST", f"{self.data_url}/sobjects/{object_type}", json=fields
        )
        if not resp.is_success:
            return CreateResult(id=None, success=False, errors=_error_detail(resp))

        body = resp.json()
        return CreateResult(
            id=body.get("id"),
            success=bool(body.get("success", False)),
            errors=format_errors(body.get("errors")),
        )

    async def update(self, object_type: str, fields: dict[str, Any]) -> UpdateResult:
        """PATCH a record. ``fields`` must carry the record's ``Id``."""
        payload = dict(fields)
        record_id = payload.pop("Id", None)
        if not record_id:
            raise ValueError("update() requires an 'Id' in fields")

        resp = await self._request(
            "PATCH", f"{self.data_url}/sobjects/{object_type}/{record_id}", json=payload
        )
        if not resp.is_success:
            return UpdateResult(success=False, errors=_error_detail(resp))
        return UpdateResult(success=True)

    async def identity(self) -> dict[str, Any]:
        """Return the OpenID claims for the session's user."""
        resp = await self._request("GET", "/services/oauth2/userinfo")
        if not resp.is_success:
            raise BackendQueryError(
                "; ".join(_error_detail(resp)) or f"Identity lookup failed ({resp.status_code})",
                status_code=resp.status_code,
            )
        return resp.json()
