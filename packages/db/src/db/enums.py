# This project was developed with assistance from AI tools.
"""
Domain enums for the brokerage back office.

Shared domain types used by both SQLAlchemy models (db package)
and Pydantic schemas (api package).
"""

import enum


class PolicyStatus(str, enum.Enum):
    NEW_LEAD = "new_lead"
    CONTACTING = "contacting"
    INFO_CAPTURED = "info_captured"
    IN_REVIEW = "in_review"
    MISSING_DOCS = "missing_docs"
    SENT_TO_CARRIER = "sent_to_carrier"
    APPROVED = "approved"
    REJECTED = "rejected"
    ACTIVE = "active"
    CANCELLED = "cancelled"

    @classmethod
    def intake_statuses(cls) -> frozenset["PolicyStatus"]:
        """Statuses before the policy is handed to processing."""
        return frozenset(
            {cls.NEW_LEAD, cls.CONTACTING, cls.INFO_CAPTURED, cls.IN_REVIEW, cls.MISSING_DOCS}
        )

    @classmethod
    def terminal_statuses(cls) -> frozenset["PolicyStatus"]:
        """Statuses where a policy no longer moves through the pipeline."""
        return frozenset({cls.REJECTED, cls.CANCELLED})

    @property
    def is_processed(self) -> bool:
        return self not in PolicyStatus.intake_statuses()

    @classmethod
    def valid_transitions(cls) -> dict["PolicyStatus", frozenset["PolicyStatus"]]:
        """Documented policy workflow. Only enforced in strict mode."""
        exits = {cls.REJECTED, cls.CANCELLED}
        return {
            cls.NEW_LEAD: frozenset({cls.CONTACTING, cls.INFO_CAPTURED, *exits}),
            cls.CONTACTING: frozenset({cls.INFO_CAPTURED, cls.NEW_LEAD, *exits}),
            cls.INFO_CAPTURED: frozenset({cls.IN_REVIEW, cls.CONTACTING, *exits}),
            cls.IN_REVIEW: frozenset({cls.MISSING_DOCS, cls.SENT_TO_CARRIER, *exits}),
            cls.MISSING_DOCS: frozenset({cls.IN_REVIEW, cls.SENT_TO_CARRIER, *exits}),
            cls.SENT_TO_CARRIER: frozenset(
                {cls.APPROVED, cls.MISSING_DOCS, cls.IN_REVIEW, *exits}
            ),
            cls.APPROVED: frozenset({cls.ACTIVE, cls.IN_REVIEW, cls.CANCELLED}),
            cls.ACTIVE: frozenset({cls.IN_REVIEW, cls.CANCELLED}),
            cls.REJECTED: frozenset({cls.IN_REVIEW}),
            cls.CANCELLED: frozenset({cls.IN_REVIEW}),
        }


class UserRole(str, enum.Enum):
    SUPER_ADMIN = "super_admin"
    MANAGER = "manager"
    AGENT = "agent"
    PROCESSOR = "processor"
    COMMISSION_ANALYST = "commission_analyst"
    CUSTOMER_SERVICE = "customer_service"
    CALL_CENTER = "call_center"


class CommissionStatus(str, enum.Enum):
    PENDING = "pending"
    CALCULATED = "calculated"
    IN_DISPUTE = "in_dispute"
    PAID = "paid"


class BatchStatus(str, enum.Enum):
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    PAID = "paid"


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ImmigrationStatus(str, enum.Enum):
    CITIZEN = "citizen"
    GREEN_CARD = "green_card"
    WORK_PERMIT_SSN = "work_permit_ssn"
    U_VISA = "u_visa"
    POLITICAL_ASYLUM = "political_asylum"
    PAROLE = "parole"
    NOTICE_OF_ACTION = "notice_of_action"
    OTHER = "other"


class IdentityDocumentType(str, enum.Enum):
    FOREIGN_PASSPORT = "foreign_passport"
    DRIVERS_LICENSE = "drivers_license"
    CREDENTIALS = "credentials"
    WORK_PERMIT_SSN_CARD = "work_permit_ssn_card"
    SSN_CARD = "ssn_card"
    WORK_STUDENT_VISA_HOLDER = "work_student_visa_holder"
    PERMANENT_RESIDENCE = "permanent_residence"
    VOTER_REGISTRATION = "voter_registration"
    CITIZEN_PASSPORT = "citizen_passport"
    MARRIAGE_CERTIFICATE = "marriage_certificate"


class TaxDeclarationType(str, enum.Enum):
    W2 = "w2"
    FORM_1099 = "1099"
    NOT_YET_DECLARED = "not_yet_declared"


class PaymentMethodType(str, enum.Enum):
    DEBIT_CARD = "debit_card"
    CREDIT_CARD = "credit_card"
    BANK_ACCOUNT = "bank_account"


class TaskType(str, enum.Enum):
    FOLLOW_UP = "follow_up"
    DOCUMENT_REQUEST = "document_request"
    BIRTHDAY_REMINDER = "birthday_reminder"
    RENEWAL_REMINDER = "renewal_reminder"
    ADDRESS_CHANGE = "address_change"
    CLAIM_FOLLOW_UP = "claim_follow_up"
    PAYMENT_REMINDER = "payment_reminder"
    GENERAL = "general"
    AOR_SIGNATURE = "aor_signature"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BoardColumn(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
