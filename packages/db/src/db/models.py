# This project was developed with assistance from AI tools.
"""
PolicyDesk -- domain models

Brokerage back-office models covering staff users, customers and their
dependents, policies, commission batches, and follow-up task boards.
"""

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base
from .enums import (
    BatchStatus,
    CommissionStatus,
    Gender,
    IdentityDocumentType,
    ImmigrationStatus,
    PaymentMethodType,
    PolicyStatus,
    TaskPriority,
    TaskStatus,
    TaskType,
    TaxDeclarationType,
    UserRole,
)


class User(Base):
    """Staff account. Identity comes from Keycloak; ``id`` matches the token subject."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    role = Column(
        Enum(UserRole, name="user_role", native_enum=False),
        nullable=False,
        default=UserRole.AGENT,
    )
    manager_id = Column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    manager = relationship("User", remote_side=[id], back_populates="team_members")
    team_members = relationship("User", back_populates="manager")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self):
        return f"<User(id={self.id}, role='{self.role}')>"


class ProcessorManagerAssignment(Base):
    """Which managers' teams a processor works for."""

    __tablename__ = "processor_manager_assignments"

    processor_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True,
    )
    manager_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True,
    )

    def __repr__(self):
        return (
            f"<ProcessorManagerAssignment(processor={self.processor_id}, "
            f"manager={self.manager_id})>"
        )


class Customer(Base):
    """Policyholder / applicant captured through the intake wizard."""

    __tablename__ = "customers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name = Column(String(255), nullable=False, index=True)
    gender = Column(Enum(Gender, name="gender", native_enum=False), nullable=True)
    birth_date = Column(Date, nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    ssn_encrypted = Column(Text, nullable=True)
    applies_to_coverage = Column(Boolean, nullable=True)
    immigration_status = Column(
        Enum(ImmigrationStatus, name="immigration_status", native_enum=False),
        nullable=True,
    )
    document_type = Column(
        Enum(IdentityDocumentType, name="identity_document_type", native_enum=False),
        nullable=True,
    )
    address = Column(Text, nullable=True)
    county = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    zip_code = Column(String(10), nullable=True)
    tax_type = Column(
        Enum(TaxDeclarationType, name="tax_declaration_type", native_enum=False),
        nullable=True,
    )
    income = Column(Numeric(12, 2), nullable=True)
    declares_other_people = Column(Boolean, nullable=False, default=False)
    created_by_agent_id = Column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    created_by_agent = relationship("User", foreign_keys=[created_by_agent_id])
    policies = relationship(
        "Policy", back_populates="customer", cascade="all",
        order_by="Policy.created_at.desc()",
    )
    dependents = relationship(
        "Dependent", back_populates="customer", cascade="all, delete-orphan",
    )
    tasks = relationship(
        "CustomerTask", back_populates="customer", cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.full_name}')>"


class Dependent(Base):
    """Household member declared on a customer's application."""

    __tablename__ = "dependents"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_id = Column(
        Uuid, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    full_name = Column(String(255), nullable=False)
    relationship_to_customer = Column("relationship", String(100), nullable=True)
    birth_date = Column(Date, nullable=True)
    immigration_status = Column(
        Enum(ImmigrationStatus, name="immigration_status", native_enum=False),
        nullable=True,
    )
    applies_to_policy = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    customer = relationship("Customer", back_populates="dependents")

    def __repr__(self):
        return f"<Dependent(id={self.id}, customer_id={self.customer_id})>"


class Policy(Base):
    """Insurance policy application/contract."""

    __tablename__ = "policies"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_id = Column(
        Uuid, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    status = Column(
        Enum(PolicyStatus, name="policy_status", native_enum=False),
        nullable=False,
        default=PolicyStatus.NEW_LEAD,
        index=True,
    )
    commission_status = Column(
        Enum(CommissionStatus, name="commission_status", native_enum=False),
        nullable=False,
        default=CommissionStatus.PENDING,
    )
    insurance_company = Column(String(100), nullable=True)
    marketplace_id = Column(String(100), nullable=True)
    policy_number = Column(String(100), nullable=True)
    plan_name = Column(String(255), nullable=True)
    monthly_premium = Column(Numeric(10, 2), nullable=True)
    tax_credit = Column(Numeric(10, 2), nullable=True)
    effective_date = Column(Date, nullable=True)
    plan_link = Column(Text, nullable=True)
    aor_link = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    assigned_processor_id = Column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    updated_by_id = Column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    customer = relationship("Customer", back_populates="policies")
    assigned_processor = relationship("User", foreign_keys=[assigned_processor_id])
    updated_by = relationship("User", foreign_keys=[updated_by_id])
    payment_method = relationship(
        "PaymentMethod", back_populates="policy", uselist=False, cascade="all, delete-orphan",
    )
    commission_records = relationship("CommissionRecord", back_populates="policy")

    def __repr__(self):
        return f"<Policy(id={self.id}, status='{self.status}')>"


class PaymentMethod(Base):
    """Tokenized payment method. Only display-safe fragments are stored."""

    __tablename__ = "payment_methods"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    policy_id = Column(
        Uuid, ForeignKey("policies.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    method_type = Column(
        Enum(PaymentMethodType, name="payment_method_type", native_enum=False),
        nullable=False,
    )
    provider = Column(String(50), nullable=True)
    provider_token = Column(Text, nullable=False, unique=True)
    card_brand = Column(String(50), nullable=True)
    card_last4 = Column(String(4), nullable=True)
    card_expiration = Column(String(7), nullable=True)
    bank_name = Column(String(100), nullable=True)
    account_last4 = Column(String(4), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    policy = relationship("Policy", back_populates="payment_method")

    def __repr__(self):
        return f"<PaymentMethod(id={self.id}, type='{self.method_type}')>"


class CommissionBatch(Base):
    """Approvable group of calculated agent payouts."""

    __tablename__ = "commission_batches"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    period_description = Column(String(100), nullable=False)
    status = Column(
        Enum(BatchStatus, name="batch_status", native_enum=False),
        nullable=False,
        default=BatchStatus.PENDING_APPROVAL,
    )
    created_by_analyst_id = Column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False,
    )
    approved_by_id = Column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True,
    )
    approved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    created_by = relationship("User", foreign_keys=[created_by_analyst_id])
    approved_by = relationship("User", foreign_keys=[approved_by_id])
    records = relationship(
        "CommissionRecord", back_populates="batch", cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<CommissionBatch(id={self.id}, status='{self.status}')>"


class CommissionRecord(Base):
    """One agent payout for one policy. A policy is commissioned at most once."""

    __tablename__ = "commission_records"
    __table_args__ = (UniqueConstraint("policy_id", name="uq_commission_records_policy_id"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    policy_id = Column(
        Uuid, ForeignKey("policies.id", ondelete="CASCADE"), nullable=False,
    )
    agent_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    commission_amount = Column(Numeric(10, 2), nullable=False)
    calculation_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    processed_by_analyst_id = Column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False,
    )
    payment_batch_id = Column(
        Uuid, ForeignKey("commission_batches.id", ondelete="CASCADE"), nullable=True, index=True,
    )

    policy = relationship("Policy", back_populates="commission_records")
    agent = relationship("User", foreign_keys=[agent_id])
    batch = relationship("CommissionBatch", back_populates="records")

    def __repr__(self):
        return f"<CommissionRecord(policy_id={self.policy_id}, amount={self.commission_amount})>"


class CustomerTask(Base):
    """Follow-up item on a customer. Also carries the policy change history."""

    __tablename__ = "customer_tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_id = Column(
        Uuid, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    policy_id = Column(
        Uuid, ForeignKey("policies.id", ondelete="CASCADE"), nullable=True, index=True,
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(
        Enum(TaskType, name="task_type", native_enum=False),
        nullable=False,
        default=TaskType.GENERAL,
    )
    priority = Column(
        Enum(TaskPriority, name="task_priority", native_enum=False),
        nullable=False,
        default=TaskPriority.MEDIUM,
    )
    status = Column(
        Enum(TaskStatus, name="task_status", native_enum=False),
        nullable=False,
        default=TaskStatus.PENDING,
    )
    assigned_to_id = Column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    created_by_id = Column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False,
    )
    due_date = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    customer = relationship("Customer", back_populates="tasks")

    def __repr__(self):
        return f"<CustomerTask(id={self.id}, status='{self.status}')>"


class PostSaleTask(Base):
    """Card on the post-sale Kanban board."""

    __tablename__ = "post_sale_tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(Enum(TaskType, name="task_type", native_enum=False), nullable=False)
    priority = Column(
        Enum(TaskPriority, name="task_priority", native_enum=False),
        nullable=False,
        default=TaskPriority.MEDIUM,
    )
    status = Column(
        Enum(TaskStatus, name="task_status", native_enum=False),
        nullable=False,
        default=TaskStatus.PENDING,
    )
    assigned_to_id = Column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    created_by_id = Column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False,
    )
    customer_id = Column(
        Uuid, ForeignKey("customers.id", ondelete="CASCADE"), nullable=True, index=True,
    )
    policy_id = Column(
        Uuid, ForeignKey("policies.id", ondelete="CASCADE"), nullable=True,
    )
    due_date = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    board_column = Column(String(50), nullable=False, default="pending")
    position = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self):
        return f"<PostSaleTask(id={self.id}, column='{self.board_column}')>"
