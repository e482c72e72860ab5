"""Per-dispatch tool call logging.

One line per tool invocation with the tool name, outcome and latency.
Arguments and results are not logged: they carry customer data, and the
session token must never end up in logs.
"""

from __future__ import annotations

import logging

logger = logging.getLogger("app.tool_calls")

# success    — operation completed
# tool_error — domain failure returned as isError: true
# rejected   — unknown tool or invalid arguments
# failed     — auth or backend transport failure
_STATUSES = frozenset({"success", "tool_error", "rejected", "failed"})


def log_tool_call(
    tool: str,
    *,
    status: str,
    latency_ms: float,
    error_message: str | None = None,
) -> None:
    if status not in _STATUSES:
        raise ValueError(f"Unknown tool call status: {status!r}")

    level = logging.INFO if status == "success" else logging.WARNING
    if error_message:
        logger.log(
            level,
            "tool=%s status=%s latency_ms=%.1f error=%s",
            tool,
            status,
            latency_ms,
            error_message[:1024],
        )
    else:
        logger.log(
            level, "tool=%s status=%s latency_ms=%.1f", tool, status, latency_ms
        )
