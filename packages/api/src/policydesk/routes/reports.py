# This project was developed with assistance from AI tools.
"""Report routes for managers and super admins."""

import uuid
from datetime import date

from db import get_db
from db.enums import PolicyStatus, UserRole
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.report import AgentPerformanceReport, SalesReport
from ..services import report as report_service

router = APIRouter()

_REPORT_ROLES = (UserRole.MANAGER, UserRole.SUPER_ADMIN)


@router.get(
    "/sales",
    response_model=SalesReport,
    dependencies=[Depends(require_roles(*_REPORT_ROLES))],
)
async def sales_report(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
    agent_id: uuid.UUID | None = Query(default=None),
    insurance_company: str | None = Query(default=None, max_length=100),
    policy_status: PolicyStatus | None = Query(default=None, alias="status"),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
) -> SalesReport:
    """Policies sold in the caller's scope, with count, active and premium totals."""
    if start_date is not None and end_date is not None and start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="start_date must not be after end_date",
        )
    return await report_service.get_sales_report(
        session,
        user,
        agent_id=agent_id,
        insurance_company=insurance_company,
        status=policy_status,
        start_date=start_date,
        end_date=end_date,
    )


@router.get(
    "/team-performance",
    response_model=list[AgentPerformanceReport],
    dependencies=[Depends(require_roles(*_REPORT_ROLES))],
)
async def team_performance_report(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
    days: int = Query(default=30, ge=1, le=365),
) -> list[AgentPerformanceReport]:
    return await report_service.get_team_performance_report(session, user, days)
