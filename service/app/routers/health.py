"""Liveness probe. Never touches Salesforce."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/healthz")
async def health() -> dict[str, str]:
    return {"status": "ok", "service": "sfdc-mcp"}
