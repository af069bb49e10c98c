"""SQLAlchemy models."""
from farmledger.models.assumptions import BreakEvenAssumptions
from farmledger.models.audit import AuditLog
from farmledger.models.expense import Expense, ExpenseCategory
from farmledger.models.farm import Farm
from farmledger.models.sale import PaymentStatus, Sale
from farmledger.models.user import Role, User, UserRole

__all__ = [
    "AuditLog",
    "BreakEvenAssumptions",
    "Expense",
    "ExpenseCategory",
    "Farm",
    "PaymentStatus",
    "Sale",
    "Role",
    "User",
    "UserRole",
]
