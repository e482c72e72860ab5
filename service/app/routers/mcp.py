"""MCP endpoint: stateless JSON-RPC 2.0 over a single POST.

Supported methods:
  - initialize: capability handshake (no session is created)
  - ping
  - tools/list: the registry's catalogue with JSON input schemas
  - tools/call: dispatch to a tool, result is a ToolResult

Protocol and server failures are returned as JSON-RPC errors with a non-2xx
HTTP status. Domain failures are ordinary ``tools/call`` results with
``isError: true`` and HTTP 200.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from app import __version__
from app.errors import (
    AuthError,
    BackendUnavailableError,
    ToolValidationError,
    UnknownToolError,
)
from app.tools.dispatcher import ToolDispatcher

logger = logging.getLogger(__name__)

router = APIRouter()

PROTOCOL_VERSION = "2025-03-26"
SERVER_NAME = "sfdc-mcp"

# JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
AUTH_FAILED = -32001
BACKEND_UNAVAILABLE = -32002


class JsonRpcRequest(BaseModel):
    jsonrpc: Literal["2.0"]
    method: str
    id: int | str | None = None
    params: dict[str, Any] | None = None


class ToolCallParams(BaseModel):
    name: str
    arguments: dict[str, Any] | None = None


def _rpc_result(request_id: int | str | None, result: dict[str, Any]) -> JSONResponse:
    return JSONResponse(content={"jsonrpc": "2.0", "id": request_id, "result": result})


def _rpc_error(
    status_code: int,
    request_id: int | str | None,
    code: int,
    message: str,
    data: Any = None,
) -> JSONResponse:
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return JSONResponse(
        status_code=status_code,
        content={"jsonrpc": "2.0", "id": request_id, "error": error},
    )


def _initialize_result() -> dict[str, Any]:
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {"tools": {"listChanged": False}},
        "serverInfo": {"name": SERVER_NAME, "version": __version__},
    }


async def _call_tool(
    dispatcher: ToolDispatcher,
    request_id: int | str | None,
    params: dict[str, Any] | None,
) -> JSONResponse:
    try:
        call = ToolCallParams.model_validate(params or {})
    except ValidationError as e:
        return _rpc_error(
            400, request_id, INVALID_PARAMS, "Invalid tools/call params",
            data={"errors": [err["msg"] for err in e.errors()]},
        )

    try:
        result = await dispatcher.invoke(call.name, call.arguments)
    except UnknownToolError as e:
        return _rpc_error(404, request_id, INVALID_PARAMS, str(e))
    except ToolValidationError as e:
        return _rpc_error(
            400, request_id, INVALID_PARAMS, str(e), data={"errors": e.errors}
        )
    except AuthError as e:
        logger.exception("Salesforce authentication failed for tool %s: %s", call.name, e)
        return _rpc_error(502, request_id, AUTH_FAILED, str(e))
    except BackendUnavailableError as e:
        logger.exception("Salesforce unavailable for tool %s: %s", call.name, e)
        return _rpc_error(502, request_id, BACKEND_UNAVAILABLE, str(e))
    except Exception:
        logger.exception("Unexpected error in tool %s", call.name)
        return _rpc_error(500, request_id, INTERNAL_ERROR, "Internal error")

    return _rpc_result(request_id, result.model_dump())


@router.post("/mcp", response_model=None)
async def mcp(request: Request) -> Response:
    dispatcher: ToolDispatcher = request.app.state.dispatcher

    try:
        body = await request.json()
    except ValueError:
        return _rpc_error(400, None, PARSE_ERROR, "Parse error")

    if isinstance(body, list):
        return _rpc_error(400, None, INVALID_REQUEST, "Batch requests are not supported")

    try:
        rpc = JsonRpcRequest.model_validate(body)
    except ValidationError:
        request_id = body.get("id") if isinstance(body, dict) else None
        return _rpc_error(400, request_id, INVALID_REQUEST, "Invalid Request")

    # Notifications carry no id and get no response body.
    if "id" not in body:
        return Response(status_code=202)

    if rpc.method == "initialize":
        return _rpc_result(rpc.id, _initialize_result())

    if rpc.method == "ping":
        return _rpc_result(rpc.id, {})

    if rpc.method == "tools/list":
        return _rpc_result(
            rpc.id,
            {"tools": [tool.describe() for tool in dispatcher.registry.list()]},
        )

    if rpc.method == "tools/call":
        return await _call_tool(dispatcher, rpc.id, rpc.params)

    return _rpc_error(404, rpc.id, METHOD_NOT_FOUND, f"Method not found: {rpc.method}")
