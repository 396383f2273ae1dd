# budgetwise_client/services/__init__.py
from .admin_service import AdminService
from .auth_service import AuthService
from .category_service import CategoryService
from .transaction_service import TransactionService
from .user_service import UserService

__all__ = [
    "AdminService",
    "AuthService",
    "CategoryService",
    "TransactionService",
    "UserService",
]
