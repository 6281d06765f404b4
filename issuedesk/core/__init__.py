"""Core domain logic for the IssueDesk circulation system.

This package contains zero external dependencies and represents
the pure business logic of the application. All adapters and
external integrations are handled by the adapters package.
"""

from .errors import InvalidConfigurationError, IssueDeskError, NotFoundError
from .models import (
    AccessionRecord,
    InventoryLine,
    IssuedItem,
    Item,
    Member,
    MemberType,
    ReturnReceipt,
)

__all__ = [
    "AccessionRecord",
    "InvalidConfigurationError",
    "InventoryLine",
    "IssueDeskError",
    "IssuedItem",
    "Item",
    "Member",
    "MemberType",
    "NotFoundError",
    "ReturnReceipt",
]
