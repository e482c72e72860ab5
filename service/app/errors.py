"""Exception hierarchy for the gateway.

Two families matter to callers:

  - Protocol errors (UnknownToolError, ToolValidationError): the request
    itself was wrong. Raised before any backend interaction.
  - Server errors (AuthError, BackendUnavailableError): the gateway or the
    backend failed. Fatal to the current dispatch.

BackendNotFoundError and BackendQueryError are domain errors. Operations
catch them and turn them into ``isError: true`` tool results, so they never
reach the HTTP layer on their own.
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base class for all gateway errors."""


class UnknownToolError(GatewayError):
    """Raised when a tool name is not in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name!r}")


class ToolValidationError(GatewayError):
    """Raised when tool arguments violate the tool's input schema.

    ``errors`` is a list of ``{"param": ..., "message": ...}`` dicts, one per
    offending parameter.
    """

    def __init__(self, tool: str, errors: list[dict[str, str]]) -> None:
        self.tool = tool
        self.errors = errors
        params = ", ".join(e["param"] for e in errors) or "<arguments>"
        super().__init__(f"Invalid arguments for tool {tool!r}: {params}")


class AuthError(GatewayError):
    """Credential exchange failed, or the backend rejected the session."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class BackendError(GatewayError):
    """Base class for failures reported by the Salesforce REST API."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class BackendQueryError(BackendError):
    """The backend rejected a request with a structured error (4xx)."""


class BackendNotFoundError(BackendError):
    """The requested record does not exist."""


class BackendUnavailableError(BackendError):
    """Transport failure or 5xx from the backend."""
