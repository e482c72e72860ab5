"""Argument schemas for each tool.

Each tool's arguments are a pydantic model. Validation runs in the
dispatcher before any credential exchange or backend call; the JSON schema
advertised by ``tools/list`` is derived from the same model, so what the
caller is told and what is enforced cannot drift apart.

Unknown keys are dropped (``extra="ignore"``) rather than rejected, matching
how MCP clients commonly pass through extra metadata.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Salesforce record ids are 15 (case-sensitive) or 18 (case-safe) characters.
# get_case / update_case also accept shorter prefixes down to 10, as the
# original tool contract did, so the backend reports "not found" itself.
# Case ids go into REST paths, so they are restricted to alphanumerics.
# Account ids only reach SOQL text (quoted) or JSON bodies.
_ID_PATTERN = r"^[A-Za-z0-9]+$"

CaseId = Annotated[str, Field(min_length=10, max_length=18, pattern=_ID_PATTERN)]
AccountId = Annotated[str, Field(min_length=15, max_length=18)]

Origin = Literal["Phone", "Email", "Web", "Chat", "Other"]
Priority = Literal["Low", "Medium", "High"]

MAX_CASE_LIST_LIMIT = 20
DEFAULT_CASE_LIST_LIMIT = 10


class ToolArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")


class SoqlQueryArgs(ToolArgs):
    soql: str = Field(min_length=1, max_length=20000, description="SOQL query text")


class GetCaseArgs(ToolArgs):
    caseId: CaseId = Field(description="Case record Id")


class WhoAmIArgs(ToolArgs):
    pass


class CreateCaseArgs(ToolArgs):
    subject: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=32000)
    origin: Origin | None = None
    priority: Priority | None = None
    status: str | None = Field(default=None, max_length=40)
    accountId: AccountId | None = Field(
        default=None, description="Account Id. Mutually exclusive with accountName."
    )
    accountName: str | None = Field(
        default=None,
        min_length=1,
        max_length=255,
        description="Exact Account name. Mutually exclusive with accountId.",
    )


class ListCasesForAccountArgs(ToolArgs):
    accountId: AccountId
    limit: int = Field(
        default=DEFAULT_CASE_LIST_LIMIT,
        ge=1,
        le=MAX_CASE_LIST_LIMIT,
        description=f"Maximum number of Cases to return (1-{MAX_CASE_LIST_LIMIT})",
    )

    @field_validator("limit", mode="before")
    @classmethod
    def _default_limit(cls, v: object) -> object:
        return DEFAULT_CASE_LIST_LIMIT if v is None else v


class UpdateCaseArgs(ToolArgs):
    caseId: CaseId
    subject: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=32000)
    origin: Origin | None = None
    priority: Priority | None = None
    status: str | None = Field(default=None, max_length=40)
