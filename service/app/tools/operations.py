"""Tool operations: one coroutine per tool.

Each operation takes validated arguments and an open SalesforceClient and
returns a Success or Failure. Expected business conditions (record not
found, validation rule, unresolved account, nothing to update) are returned
as Failure — never raised — so the caller can tell "processed but rejected"
apart from "the system failed". Transport and auth failures are not caught
here and propagate to the dispatcher.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel

from app.errors import BackendNotFoundError, BackendQueryError
from app.salesforce import soql
from app.salesforce.client import SalesforceClient
from app.tools import Failure, Outcome, Success
from app.tools.schemas import (
    MAX_CASE_LIST_LIMIT,
    CreateCaseArgs,
    GetCaseArgs,
    ListCasesForAccountArgs,
    SoqlQueryArgs,
    UpdateCaseArgs,
    WhoAmIArgs,
)

logger = logging.getLogger(__name__)

# Argument name → Case API field name. Also the allow-list for update_case.
CASE_FIELD_MAP: dict[str, str] = {
    "subject": "Subject",
    "description": "Description",
    "origin": "Origin",
    "priority": "Priority",
    "status": "Status",
}

_CASE_LIST_FIELDS = (
    "Id",
    "CaseNumber",
    "Subject",
    "Status",
    "Priority",
    "Origin",
    "CreatedDate",
)


def build_case_fields(args: BaseModel, field_map: dict[str, str]) -> dict[str, Any]:
    """Map caller-supplied arguments onto backend field names.

    Only arguments the caller actually sent, with a non-empty value, are
    included, so an omitted argument never overwrites a field with null.
    """
    fields: dict[str, Any] = {}
    for arg_name, api_name in field_map.items():
        if arg_name not in args.model_fields_set:
            continue
        value = getattr(args, arg_name)
        if value is None or value == "":
            continue
        fields[api_name] = value
    return fields


def _join_errors(errors: list[str]) -> str:
    return "; ".join(errors) or "Unknown error"


async def soql_query(args: SoqlQueryArgs, client: SalesforceClient) -> Outcome:
    # Caller-authored query text is sent as-is; no quoting applies.
    try:
        records = await client.query(args.soql)
    except BackendQueryError as e:
        return Failure(f"SOQL query failed: {e}")
    return Success(records)


async def get_case(args: GetCaseArgs, client: SalesforceClient) -> Outcome:
    try:
        record = await client.retrieve("Case", args.caseId)
    except BackendNotFoundError:
        return Failure(f"Case not found: {args.caseId}")
    except BackendQueryError as e:
        return Failure(f"Failed to fetch Case {args.caseId}: {e}")
    return Success(record)


async def sfdc_whoami(args: WhoAmIArgs, client: SalesforceClient) -> Outcome:
    try:
        claims = await client.identity()
    except BackendQueryError as e:
        return Failure(f"Identity lookup failed: {e}")
    return Success(claims)


async def resolve_account_id(client: SalesforceClient, account_name: str) -> str | None:
    """Return the Id of the newest Account named exactly ``account_name``."""
    query = soql.select(
        "Account",
        ["Id", "Name"],
        where=f"Name = {soql.quote(account_name)}",
        order_by="CreatedDate DESC",
        limit=1,
    )
    records = await client.query(query)
    if not records:
        return None
    return records[0].get("Id")


async def create_case(args: CreateCaseArgs, client: SalesforceClient) -> Outcome:
    if args.accountId and args.accountName:
        return Failure(
            "Provide either accountId or accountName, not both."
        )

    fields = build_case_fields(args, CASE_FIELD_MAP)

    if args.accountId:
        fields["AccountId"] = args.accountId
    elif args.accountName:
        try:
            account_id = await resolve_account_id(client, args.accountName)
        except BackendQueryError as e:
            return Failure(f"Failed to look up Account {args.accountName!r}: {e}")
        if not account_id:
            return Failure(
                f"No Account found with name {args.accountName!r}; Case was not created."
            )
        fields["AccountId"] = account_id

    result = await client.create("Case", fields)
    if not result.success:
        return Failure(f"Failed to create Case: {_join_errors(result.errors)}")

    logger.info("Created Case %s", result.id)
    return Success({"id": result.id, "success": True})


async def list_cases_for_account(
    args: ListCasesForAccountArgs, client: SalesforceClient
) -> Outcome:
    query = soql.select(
        "Case",
        _CASE_LIST_FIELDS,
        where=f"AccountId = {soql.quote(args.accountId)}",
        order_by="CreatedDate DESC",
        limit=min(args.limit, MAX_CASE_LIST_LIMIT),
    )
    try:
        records = await client.query(query)
    except BackendQueryError as e:
        return Failure(f"Failed to list Cases for Account {args.accountId}: {e}")
    return Success(records)


async def update_case(args: UpdateCaseArgs, client: SalesforceClient) -> Outcome:
    fields = build_case_fields(args, CASE_FIELD_MAP)
    if not fields:
        return Failure(
            "No editable fields supplied. Provide at least one of: "
            + ", ".join(CASE_FIELD_MAP)
            + "."
        )

    result = await client.update("Case", {"Id": args.caseId, **fields})
    if not result.success:
        return Failure(
            f"Failed to update Case {args.caseId}: {_join_errors(result.errors)}"
        )

    logger.info("Updated Case %s (%s)", args.caseId, ", ".join(fields))
    return Success({"id": args.caseId, "success": True, "updated": sorted(fields)})
