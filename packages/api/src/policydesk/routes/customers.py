# This project was developed with assistance from AI tools.
"""Customer routes: listing, detail, full intake, payment method, tasks."""

import uuid

from db import Customer, get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..routes.policies import build_policy_response
from ..schemas import Pagination
from ..schemas.auth import UserContext
from ..schemas.customer import (
    CustomerDetail,
    CustomerListResponse,
    CustomerSummary,
    DependentResponse,
    IntakeCreate,
    IntakeResponse,
    LeadAssignmentRequest,
    LeadAssignmentResponse,
    PaymentMethodResponse,
)
from ..schemas.task import CustomerTaskCreate, CustomerTaskResponse
from ..services import customer as customer_service
from ..services import task as task_service
from ..services.customer import IntakeError, LeadAssignmentError

router = APIRouter()

_ALL_ROLES = tuple(UserRole)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")


def _build_customer_detail(user: UserContext, customer: Customer) -> CustomerDetail:
    agent = customer.created_by_agent
    return CustomerDetail(
        id=customer.id,
        full_name=customer.full_name,
        gender=customer.gender,
        birth_date=customer.birth_date,
        email=customer.email,
        phone=customer.phone,
        ssn=customer_service.reveal_ssn(user, customer),
        applies_to_coverage=customer.applies_to_coverage,
        immigration_status=customer.immigration_status,
        document_type=customer.document_type,
        address=customer.address,
        county=customer.county,
        state=customer.state,
        zip_code=customer.zip_code,
        tax_type=customer.tax_type,
        income=customer.income,
        declares_other_people=customer.declares_other_people,
        agent_id=customer.created_by_agent_id,
        agent_name=agent.full_name if agent is not None else None,
        created_at=customer.created_at,
        updated_at=customer.updated_at,
        dependents=[DependentResponse.model_validate(d) for d in customer.dependents],
        policies=[build_policy_response(user, p) for p in customer.policies],
    )


@router.get(
    "/",
    response_model=CustomerListResponse,
    dependencies=[Depends(require_roles(*_ALL_ROLES))],
)
async def list_customers(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
    search: str | None = Query(default=None, max_length=100),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> CustomerListResponse:
    """List customers visible to the current user's role and data scope."""
    rows, total = await customer_service.list_customers(
        session, user, search=search, offset=offset, limit=limit
    )
    items = [
        CustomerSummary(
            id=customer.id,
            full_name=customer.full_name,
            email=customer.email,
            phone=customer.phone,
            state=customer.state,
            agent_id=customer.created_by_agent_id,
            agent_name=customer.created_by_agent.full_name
            if customer.created_by_agent is not None
            else None,
            policy_count=policy_count or 0,
            created_at=customer.created_at,
        )
        for customer, policy_count in rows
    ]
    return CustomerListResponse(
        data=items,
        pagination=Pagination(
            total=total, offset=offset, limit=limit, has_more=(offset + limit < total)
        ),
    )


@router.post(
    "/",
    response_model=IntakeResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(UserRole.AGENT))],
)
async def create_full_application(
    body: IntakeCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> IntakeResponse:
    """Submit the intake wizard: customer, first policy, dependents, payment method."""
    try:
        created = await customer_service.create_full_application(session, user, body)
    except IntakeError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return IntakeResponse(**created)


@router.get(
    "/{customer_id}",
    response_model=CustomerDetail,
    dependencies=[Depends(require_roles(*_ALL_ROLES))],
)
async def get_customer(
    customer_id: uuid.UUID,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> CustomerDetail:
    """Customer detail. Returns 404 for out-of-scope customers."""
    customer = await customer_service.get_customer(session, user, customer_id)
    if customer is None:
        raise _not_found()
    return _build_customer_detail(user, customer)


@router.get(
    "/{customer_id}/payment-method/{policy_id}",
    response_model=PaymentMethodResponse,
    dependencies=[Depends(require_roles(UserRole.SUPER_ADMIN))],
)
async def get_payment_method(
    customer_id: uuid.UUID,
    policy_id: uuid.UUID,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> PaymentMethodResponse:
    """Display-safe payment method details for one of the customer's policies."""
    method = await customer_service.get_payment_method(session, customer_id, policy_id)
    if method is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Payment method not found"
        )
    return PaymentMethodResponse.model_validate(method)


@router.get(
    "/{customer_id}/tasks",
    response_model=list[CustomerTaskResponse],
    dependencies=[Depends(require_roles(*_ALL_ROLES))],
)
async def list_customer_tasks(
    customer_id: uuid.UUID,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> list[CustomerTaskResponse]:
    tasks = await task_service.list_customer_tasks(session, user, customer_id)
    if tasks is None:
        raise _not_found()
    return [CustomerTaskResponse.model_validate(t) for t in tasks]


@router.post(
    "/{customer_id}/tasks",
    response_model=CustomerTaskResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*_ALL_ROLES))],
)
async def create_customer_task(
    customer_id: uuid.UUID,
    body: CustomerTaskCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> CustomerTaskResponse:
    task = await task_service.create_customer_task(
        session, user, customer_id, **body.model_dump(exclude_none=True)
    )
    if task is None:
        raise _not_found()
    return CustomerTaskResponse.model_validate(task)


@router.put(
    "/{customer_id}/agent",
    response_model=LeadAssignmentResponse,
    dependencies=[Depends(require_roles(UserRole.MANAGER, UserRole.SUPER_ADMIN))],
)
async def assign_lead_to_agent(
    customer_id: uuid.UUID,
    body: LeadAssignmentRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> LeadAssignmentResponse:
    """Move a lead to another agent's book."""
    try:
        assigned = await customer_service.assign_lead_to_agent(
            session, user, customer_id, body.agent_id
        )
    except LeadAssignmentError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    if assigned is None:
        raise _not_found()
    _, agent = assigned
    return LeadAssignmentResponse(
        customer_id=customer_id, agent_id=agent.id, agent_name=agent.full_name
    )
