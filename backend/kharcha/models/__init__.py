# Re-export all models for convenient imports
from kharcha.models.user import User, UserPreferences
from kharcha.models.verification_token import VerificationToken
from kharcha.models.account import Account, AccountType
from kharcha.models.outflow_type import OutflowType
from kharcha.models.transaction import Transaction
from kharcha.models.budget import Budget
from kharcha.models.notification import Notification, NotificationType

__all__ = [
    "User",
    "UserPreferences",
    "VerificationToken",
    "Account",
    "AccountType",
    "OutflowType",
    "Transaction",
    "Budget",
    "Notification",
    "NotificationType",
]
