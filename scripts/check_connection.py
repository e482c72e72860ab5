#!/usr/bin/env python3
"""Smoke-test Salesforce connectivity with the gateway's own auth and client.

Exchanges the configured client credentials for a session, prints the
identity claims, then runs a small SOQL query. Reads the same environment
variables (or .env file) as the service.

Usage:
    python scripts/check_connection.py
    python scripts/check_connection.py --soql "SELECT Id, Subject FROM Case LIMIT 5"
"""

import argparse
import asyncio
import json
import sys

from app.config import Settings
from app.errors import GatewayError
from app.salesforce.auth import CredentialProvider
from app.salesforce.client import SalesforceClient

DEFAULT_SOQL = "SELECT Id, Name FROM Account LIMIT 10"


async def check(settings: Settings, soql: str) -> None:
    session = await CredentialProvider(settings).acquire()

    async with SalesforceClient(
        session,
        api_version=settings.sfdc_api_version,
        timeout=settings.sfdc_http_timeout_seconds,
    ) as client:
        claims = await client.identity()
        print("IDENTITY OK:", claims.get("user_id"), claims.get("organization_id"))

        records = await client.query(soql)
        print(f"SOQL OK ({len(records)} records):")
        print(json.dumps(records, indent=2, default=str))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--soql", default=DEFAULT_SOQL, help="Query to run after auth")
    args = parser.parse_args()

    try:
        asyncio.run(check(Settings(), args.soql))
    except GatewayError as e:
        print(f"SFDC CHECK FAILED: {type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
