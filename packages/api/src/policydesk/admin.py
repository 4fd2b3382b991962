# This project was developed with assistance from AI tools.
"""
SQLAdmin configuration for database administration UI

Access the admin panel at: http://localhost:8000/admin

When AUTH_DISABLED=false, requires admin credentials via login form.
When AUTH_DISABLED=true, admin panel is open (dev mode).
"""

from db import (
    CommissionBatch,
    CommissionRecord,
    Customer,
    CustomerTask,
    Policy,
    PostSaleTask,
    User,
)
from sqladmin import Admin, ModelView
from sqladmin.authentication import AuthenticationBackend
from sqlalchemy import create_engine
from starlette.requests import Request
from starlette.responses import Response

from .core.config import settings

# SQLAdmin requires a sync engine; derive from the async DATABASE_URL
_sync_url = settings.DATABASE_URL.replace("+asyncpg", "")
engine = create_engine(_sync_url, echo=False)


class AdminAuth(AuthenticationBackend):
    """Session-based auth gate for SQLAdmin.

    When AUTH_DISABLED=true, authenticate() always returns True (dev mode).
    Otherwise, requires login with SQLADMIN_USER / SQLADMIN_PASSWORD.
    """

    async def login(self, request: Request) -> bool:
        form = await request.form()
        if (
            form.get("username") == settings.SQLADMIN_USER
            and form.get("password") == settings.SQLADMIN_PASSWORD
        ):
            request.session.update({"admin_authenticated": True})
            return True
        return False

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> Response | bool:
        if settings.AUTH_DISABLED:
            return True
        return request.session.get("admin_authenticated", False)


class UserAdmin(ModelView, model=User):
    column_list = [User.id, User.email, User.first_name, User.last_name, User.role, User.is_active]
    column_searchable_list = [User.email, User.last_name]
    column_sortable_list = [User.email, User.role, User.created_at]
    can_delete = False
    name = "User"
    name_plural = "Users"
    icon = "fa-solid fa-id-badge"


class CustomerAdmin(ModelView, model=Customer):
    column_list = [
        Customer.id,
        Customer.full_name,
        Customer.email,
        Customer.state,
        Customer.created_by_agent_id,
        Customer.created_at,
    ]
    # Ciphertext only; never shown or edited by hand
    form_excluded_columns = [Customer.ssn_encrypted]
    column_details_exclude_list = [Customer.ssn_encrypted]
    column_searchable_list = [Customer.full_name, Customer.email]
    column_sortable_list = [Customer.full_name, Customer.created_at]
    column_default_sort = [(Customer.created_at, True)]
    name = "Customer"
    name_plural = "Customers"
    icon = "fa-solid fa-user"


class PolicyAdmin(ModelView, model=Policy):
    column_list = [
        Policy.id,
        Policy.customer_id,
        Policy.status,
        Policy.insurance_company,
        Policy.monthly_premium,
        Policy.commission_status,
        Policy.assigned_processor_id,
        Policy.created_at,
    ]
    column_searchable_list = [Policy.insurance_company, Policy.policy_number]
    column_sortable_list = [Policy.status, Policy.created_at]
    column_default_sort = [(Policy.created_at, True)]
    name = "Policy"
    name_plural = "Policies"
    icon = "fa-solid fa-file-contract"


class CommissionBatchAdmin(ModelView, model=CommissionBatch):
    column_list = [
        CommissionBatch.id,
        CommissionBatch.period_description,
        CommissionBatch.status,
        CommissionBatch.approved_at,
        CommissionBatch.created_at,
    ]
    column_default_sort = [(CommissionBatch.created_at, True)]
    name = "Commission Batch"
    name_plural = "Commission Batches"
    icon = "fa-solid fa-layer-group"


class CommissionRecordAdmin(ModelView, model=CommissionRecord):
    column_list = [
        CommissionRecord.id,
        CommissionRecord.policy_id,
        CommissionRecord.agent_id,
        CommissionRecord.commission_amount,
        CommissionRecord.payment_batch_id,
    ]
    can_create = False
    can_edit = False
    can_delete = False
    name = "Commission Record"
    name_plural = "Commission Records"
    icon = "fa-solid fa-dollar-sign"


class CustomerTaskAdmin(ModelView, model=CustomerTask):
    column_list = [
        CustomerTask.id,
        CustomerTask.customer_id,
        CustomerTask.title,
        CustomerTask.type,
        CustomerTask.status,
        CustomerTask.created_at,
    ]
    column_default_sort = [(CustomerTask.created_at, True)]
    name = "Customer Task"
    name_plural = "Customer Tasks"
    icon = "fa-solid fa-clipboard-check"


class PostSaleTaskAdmin(ModelView, model=PostSaleTask):
    column_list = [
        PostSaleTask.id,
        PostSaleTask.title,
        PostSaleTask.board_column,
        PostSaleTask.position,
        PostSaleTask.status,
    ]
    name = "Post-sale Task"
    name_plural = "Post-sale Tasks"
    icon = "fa-solid fa-columns"


def setup_admin(app):
    """Set up SQLAdmin and mount it to the FastAPI app."""
    auth_backend = AdminAuth(
        secret_key=settings.SQLADMIN_SECRET_KEY,
    )
    admin = Admin(app, engine, title="PolicyDesk Admin", authentication_backend=auth_backend)

    admin.add_view(UserAdmin)
    admin.add_view(CustomerAdmin)
    admin.add_view(PolicyAdmin)
    admin.add_view(CommissionBatchAdmin)
    admin.add_view(CommissionRecordAdmin)
    admin.add_view(CustomerTaskAdmin)
    admin.add_view(PostSaleTaskAdmin)

    return admin
