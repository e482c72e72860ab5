"""Tool registry: the immutable catalogue of tools the gateway serves.

Built once during app startup and stored on ``app.state``; the dispatcher
receives it by reference. Nothing mutates it afterwards.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel

from app.errors import UnknownToolError
from app.tools import Outcome
from app.tools import operations, schemas

Handler = Callable[[Any, Any], Awaitable[Outcome]]


@dataclass(frozen=True, slots=True)
class ToolDefinition:
    name: str
    description: str
    args_model: type[BaseModel]
    handler: Handler

    @property
    def input_schema(self) -> dict[str, Any]:
        return self.args_model.model_json_schema()

    def describe(self) -> dict[str, Any]:
        """The ``tools/list`` entry for this tool."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


class ToolRegistry:
    def __init__(self, definitions: Iterable[ToolDefinition]) -> None:
        tools: dict[str, ToolDefinition] = {}
        for definition in definitions:
            if definition.name in tools:
                raise ValueError(f"Duplicate tool name: {definition.name!r}")
            tools[definition.name] = definition
        self._tools = MappingProxyType(tools)

    def list(self) -> tuple[ToolDefinition, ...]:
        return tuple(self._tools.values())

    def get(self, name: str) -> ToolDefinition:
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


def build_registry() -> ToolRegistry:
    """The six CRM tools, in the order ``tools/list`` advertises them."""
    return ToolRegistry([
        ToolDefinition(
            name="soql_query",
            description="Run a SOQL query and return records",
            args_model=schemas.SoqlQueryArgs,
            handler=operations.soql_query,
        ),
        ToolDefinition(
            name="get_case",
            description="Fetch a Case by Id",
            args_model=schemas.GetCaseArgs,
            handler=operations.get_case,
        ),
        ToolDefinition(
            name="sfdc_whoami",
            description="Verify Salesforce auth by calling the identity endpoint",
            args_model=schemas.WhoAmIArgs,
            handler=operations.sfdc_whoami,
        ),
        ToolDefinition(
            name="create_case",
            description=(
                "Create a new Salesforce Case (safe subset of fields). "
                "Optionally link it to an Account by accountId or by exact "
                "accountName, but not both."
            ),
            args_model=schemas.CreateCaseArgs,
            handler=operations.create_case,
        ),
        ToolDefinition(
            name="list_cases_for_account",
            description=(
                "List the most recent Cases for an Account, newest first "
                f"(default {schemas.DEFAULT_CASE_LIST_LIMIT}, "
                f"max {schemas.MAX_CASE_LIST_LIMIT})"
            ),
            args_model=schemas.ListCasesForAccountArgs,
            handler=operations.list_cases_for_account,
        ),
        ToolDefinition(
            name="update_case",
            description=(
                "Update editable fields on a Case "
                "(Subject, Description, Origin, Priority, Status)"
            ),
            args_model=schemas.UpdateCaseArgs,
            handler=operations.update_case,
        ),
    ])
