# This project was developed with assistance from AI tools.
"""Dashboard route."""

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.dashboard import DashboardStats
from ..services.dashboard import get_dashboard_stats

router = APIRouter()


@router.get(
    "/stats",
    response_model=DashboardStats,
    dependencies=[Depends(require_roles(*UserRole))],
)
async def dashboard_stats(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> DashboardStats:
    """Headline counts for the caller's data scope."""
    return await get_dashboard_stats(session, user)
