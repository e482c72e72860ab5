"""Shared test fixtures for the gateway.

FakeSalesforce stands in for both the OAuth token endpoint and the REST
API via httpx.MockTransport, so tests never touch the network. It records
every request so tests can assert on what was (or was not) sent.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from app.config import Settings
from app.salesforce.auth import CredentialProvider, SessionDescriptor
from app.salesforce.client import SalesforceClient
from app.tools.dispatcher import ToolDispatcher
from app.tools.registry import build_registry

TOKEN_URL = "https://login.example.com/services/oauth2/token"
INSTANCE_URL = "https://acme.my.salesforce.com"
DATA = "/services/data/v60.0"
TOKEN_PATH = "/services/oauth2/token"
QUERY_PATH = f"{DATA}/query"

Responder = Callable[[httpx.Request], httpx.Response]


class FakeSalesforce:
    """Routes (method, path) to canned responses and records all requests."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Responder] = {}

    def add(
        self,
        method: str,
        path: str,
        *,
        status: int = 200,
        json: Any = None,
        text: str | None = None,
    ) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status, text=text)
            if json is None:
                return httpx.Response(status)
            return httpx.Response(status, json=json)

        self._routes[(method, path)] = respond

    def route(self, method: str, path: str, responder: Responder) -> None:
        self._routes[(method, path)] = responder

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self._routes.get((request.method, request.url.path))
        if responder is None:
            return httpx.Response(
                404,
                json=[{"errorCode": "NOT_FOUND", "message": "The requested resource does not exist"}],
            )
        return responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str, path_prefix: str = "") -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path.startswith(path_prefix)
        ]

    def queries(self) -> list[str]:
        """SOQL text of every query request, in order."""
        return [r.url.params["q"] for r in self.calls("GET", QUERY_PATH)]


@pytest.fixture
def settings() -> Settings:
    """Minimal settings for unit tests — no real Salesforce calls."""
    return Settings(
        sfdc_token_url=TOKEN_URL,
        sfdc_client_id="test-client-id",
        sfdc_client_secret="test-client-secret",
        mcp_api_key="test-api-key",
    )


@pytest.fixture
def fake_sf() -> FakeSalesforce:
    fake = FakeSalesforce()
    fake.add(
        "POST",
        TOKEN_PATH,
        json={"access_token": "00Dxx!token", "instance_url": INSTANCE_URL},
    )
    return fake


@pytest.fixture
def session() -> SessionDescriptor:
    return SessionDescriptor(instance_url=INSTANCE_URL, access_token="00Dxx!token")


@pytest.fixture
def dispatcher(settings: Settings, fake_sf: FakeSalesforce) -> ToolDispatcher:
    return ToolDispatcher(
        registry=build_registry(),
        credentials=CredentialProvider(settings, transport=fake_sf.transport),
        client_factory=functools.partial(SalesforceClient, transport=fake_sf.transport),
    )
