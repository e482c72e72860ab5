"""Tool dispatcher: validate → authenticate → run → wrap.

Each ``invoke`` is independent. A fresh Salesforce session is acquired and
a fresh HTTP client opened for every call, and both are dropped when the
call returns. The steps run strictly in order; nothing runs concurrently
within one dispatch.

Failure routing:
  - UnknownToolError / ToolValidationError are raised before any network I/O.
  - AuthError / BackendUnavailableError propagate — the system failed.
  - Domain failures come back from the operation as Failure and are wrapped
    as ``isError: true`` ToolResults.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from app.errors import GatewayError, ToolValidationError, UnknownToolError
from app.observability.logger import log_tool_call
from app.salesforce.auth import CredentialProvider, SessionDescriptor
from app.salesforce.client import SalesforceClient
from app.tools import Failure, Success, ToolResult
from app.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

ClientFactory = Callable[[SessionDescriptor], SalesforceClient]


def _validation_errors(exc: ValidationError) -> list[dict[str, str]]:
    return [
        {
            "param": ".".join(str(part) for part in err["loc"]) or "<arguments>",
            "message": err["msg"],
        }
        for err in exc.errors()
    ]


class ToolDispatcher:
    def __init__(
        self,
        registry: ToolRegistry,
        credentials: CredentialProvider,
        client_factory: ClientFactory = SalesforceClient,
    ) -> None:
        self._registry = registry
        self._credentials = credentials
        self._client_factory = client_factory

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def invoke(self, name: str, raw_args: dict[str, Any] | None) -> ToolResult:
        start = time.monotonic()
        try:
            result = await self._invoke(name, raw_args)
        except (UnknownToolError, ToolValidationError) as e:
            log_tool_call(
                name,
                status="rejected",
                latency_ms=(time.monotonic() - start) * 1000,
                error_message=str(e),
            )
            raise
        except GatewayError as e:
            log_tool_call(
                name,
                status="failed",
                latency_ms=(time.monotonic() - start) * 1000,
                error_message=f"{type(e).__name__}: {e}",
            )
            raise

        log_tool_call(
            name,
            status="tool_error" if result.isError else "success",
            latency_ms=(time.monotonic() - start) * 1000,
        )
        return result

    async def _invoke(self, name: str, raw_args: dict[str, Any] | None) -> ToolResult:
        definition = self._registry.get(name)

        try:
            args = definition.args_model.model_validate(
                raw_args if raw_args is not None else {}
            )
        except ValidationError as e:
            raise ToolValidationError(name, _validation_errors(e)) from e

        session = await self._credentials.acquire()

        async with self._client_factory(session) as client:
            outcome = await definition.handler(args, client)

        if isinstance(outcome, Failure):
            return ToolResult.text(outcome.message, is_error=True)
        if isinstance(outcome, Success):
            return ToolResult.text(json.dumps(outcome.payload, indent=2, default=str))
        raise TypeError(
            f"Tool {name!r} returned {type(outcome).__name__}, expected Success or Failure"
        )
