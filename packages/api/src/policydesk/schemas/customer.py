# This project was developed with assistance from AI tools.
"""Customer, intake and payment method schemas."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from db.enums import (
    Gender,
    IdentityDocumentType,
    ImmigrationStatus,
    PaymentMethodType,
    TaxDeclarationType,
)
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from . import Pagination
from .policy import PolicyResponse


class DependentCreate(BaseModel):
    full_name: str = Field(min_length=1, max_length=255)
    relationship: str | None = Field(default=None, max_length=100)
    birth_date: date | None = None
    immigration_status: ImmigrationStatus | None = None
    applies_to_policy: bool = True


class PaymentMethodCreate(BaseModel):
    """Tokenized payment method from the payment provider widget.

    Only the provider token and display fragments are accepted; full card
    or account numbers never reach the API.
    """

    method_type: PaymentMethodType
    provider: str | None = Field(default=None, max_length=50)
    provider_token: str = Field(min_length=1)
    card_brand: str | None = Field(default=None, max_length=50)
    card_last4: str | None = Field(default=None, pattern=r"^\d{4}$")
    card_expiration: str | None = Field(default=None, pattern=r"^\d{2}/\d{2,4}$")
    bank_name: str | None = Field(default=None, max_length=100)
    account_last4: str | None = Field(default=None, pattern=r"^\d{4}$")

    @model_validator(mode="after")
    def _fragments_match_type(self):
        if self.method_type == PaymentMethodType.BANK_ACCOUNT:
            if self.account_last4 is None:
                raise ValueError("account_last4 is required for bank accounts")
        elif self.card_last4 is None:
            raise ValueError("card_last4 is required for cards")
        return self


class IntakePolicy(BaseModel):
    insurance_company: str | None = Field(default=None, max_length=100)
    marketplace_id: str | None = Field(default=None, max_length=100)
    plan_name: str | None = Field(default=None, max_length=255)
    monthly_premium: Decimal | None = Field(default=None, ge=0)
    tax_credit: Decimal | None = Field(default=None, ge=0)
    effective_date: date | None = None
    plan_link: str | None = None
    aor_link: str | None = None
    notes: str | None = None


class IntakeCreate(BaseModel):
    """Full application captured by the intake wizard."""

    full_name: str = Field(min_length=1, max_length=255)
    gender: Gender | None = None
    birth_date: date
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    ssn: str | None = Field(default=None, pattern=r"^\d{3}-?\d{2}-?\d{4}$")
    applies_to_coverage: bool | None = None
    immigration_status: ImmigrationStatus | None = None
    document_type: IdentityDocumentType | None = None
    address: str | None = None
    county: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=100)
    zip_code: str | None = Field(default=None, max_length=10)
    tax_type: TaxDeclarationType | None = None
    income: Decimal | None = Field(default=None, ge=0)
    declares_other_people: bool = False
    policy: IntakePolicy = Field(default_factory=IntakePolicy)
    dependents: list[DependentCreate] = []
    payment_method: PaymentMethodCreate | None = None


class IntakeResponse(BaseModel):
    customer_id: uuid.UUID
    policy_id: uuid.UUID
    dependent_count: int = 0
    payment_method_id: uuid.UUID | None = None


class CustomerSummary(BaseModel):
    id: uuid.UUID
    full_name: str
    email: str | None = None
    phone: str | None = None
    state: str | None = None
    agent_id: uuid.UUID
    agent_name: str | None = None
    policy_count: int = 0
    created_at: datetime


class LeadAssignmentRequest(BaseModel):
    agent_id: uuid.UUID


class LeadAssignmentResponse(BaseModel):
    customer_id: uuid.UUID
    agent_id: uuid.UUID
    agent_name: str


class CustomerListResponse(BaseModel):
    data: list[CustomerSummary]
    pagination: Pagination


class DependentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    full_name: str
    relationship: str | None = Field(
        default=None, validation_alias=AliasChoices("relationship_to_customer", "relationship")
    )
    birth_date: date | None = None
    immigration_status: ImmigrationStatus | None = None
    applies_to_policy: bool


class CustomerDetail(BaseModel):
    """Customer with dependents and policies. ``ssn`` is masked unless allowed."""

    id: uuid.UUID
    full_name: str
    gender: Gender | None = None
    birth_date: date
    email: str | None = None
    phone: str | None = None
    ssn: str | None = None
    applies_to_coverage: bool | None = None
    immigration_status: ImmigrationStatus | None = None
    document_type: IdentityDocumentType | None = None
    address: str | None = None
    county: str | None = None
    state: str | None = None
    zip_code: str | None = None
    tax_type: TaxDeclarationType | None = None
    income: Decimal | None = None
    declares_other_people: bool = False
    agent_id: uuid.UUID
    agent_name: str | None = None
    created_at: datetime
    updated_at: datetime
    dependents: list[DependentResponse] = []
    policies: list[PolicyResponse] = []


class PaymentMethodResponse(BaseModel):
    """Display-safe payment method fields."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    policy_id: uuid.UUID
    method_type: PaymentMethodType
    provider: str | None = None
    card_brand: str | None = None
    card_last4: str | None = None
    card_expiration: str | None = None
    bank_name: str | None = None
    account_last4: str | None = None
