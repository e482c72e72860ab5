"""MCP tools exposed by the gateway."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Response envelope shared by every tool.

    ``isError`` is true for domain failures (not found, validation rule,
    ambiguous input). Protocol and server failures never produce a
    ToolResult — they surface as HTTP-level errors.
    """

    content: list[TextContent]
    isError: bool = False

    @classmethod
    def text(cls, text: str, *, is_error: bool = False) -> ToolResult:
        return cls(content=[TextContent(text=text)], isError=is_error)


@dataclass(frozen=True, slots=True)
class Success:
    """Operation completed; ``payload`` is serialized to JSON for the caller."""

    payload: Any


@dataclass(frozen=True, slots=True)
class Failure:
    """Operation was processed but rejected by a business rule or the backend."""

    message: str


Outcome = Success | Failure
