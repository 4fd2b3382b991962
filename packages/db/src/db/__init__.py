# This project was developed with assistance from AI tools.
__version__ = "0.1.0"

from .database import Base, DatabaseService, get_db, get_db_service
from .enums import (
    BatchStatus,
    BoardColumn,
    CommissionStatus,
    PaymentMethodType,
    PolicyStatus,
    TaskPriority,
    TaskStatus,
    TaskType,
    UserRole,
)
from .models import (
    CommissionBatch,
    CommissionRecord,
    Customer,
    CustomerTask,
    Dependent,
    PaymentMethod,
    Policy,
    PostSaleTask,
    ProcessorManagerAssignment,
    User,
)

__all__ = [
    "Base",
    "DatabaseService",
    "get_db",
    "get_db_service",
    "__version__",
    # Enums
    "PolicyStatus",
    "UserRole",
    "CommissionStatus",
    "BatchStatus",
    "PaymentMethodType",
    "TaskType",
    "TaskPriority",
    "TaskStatus",
    "BoardColumn",
    # Models
    "User",
    "ProcessorManagerAssignment",
    "Customer",
    "Dependent",
    "PaymentMethod",
    "Policy",
    "CommissionBatch",
    "CommissionRecord",
    "CustomerTask",
    "PostSaleTask",
]
