# This project was developed with assistance from AI tools.
"""Liveness and readiness endpoints."""

from db import DatabaseService, get_db_service
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

router = APIRouter()


@router.get("/")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/ready")
async def ready(db_service: DatabaseService = Depends(get_db_service)) -> JSONResponse:
    """Ready once the database answers."""
    if await db_service.health_check():
        return JSONResponse({"status": "ready", "database": "ok"})
    return JSONResponse(
        {"status": "unavailable", "database": "unreachable"},
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
    )
