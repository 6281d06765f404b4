"""Port interfaces for the IssueDesk circulation system.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - AccessionRecordStorePort: List physical copies
   - IssuedItemStorePort: List, look up and persist loans
   - CatalogStorePort: Persist and look up items, members and copies

2. **Driving Ports** (adapters/external systems call into core)
   - CirculationPort: Availability, due dates, fees, issue and return
   - CatalogPort: Catalog maintenance and inventory reporting
"""

from abc import ABC, abstractmethod
from datetime import datetime

from .models import (
    AccessionRecord,
    InventoryLine,
    IssuedItem,
    Item,
    Member,
    MemberType,
    ReturnReceipt,
)


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class AccessionRecordStorePort(ABC):
    """Port for reading the accession record collection.

    Implementations must return every record they hold; filtering is the
    core's job.
    """

    @abstractmethod
    async def get_all_accession_records(self) -> list[AccessionRecord]:
        """Retrieve every accession record.

        Returns:
            List of AccessionRecord objects ordered by id.
            Empty list if the collection is empty.

        Raises:
            Exception: If the backing store is unavailable.
        """


class IssuedItemStorePort(ABC):
    """Port for reading and persisting loan records.

    The availability query only needs ``get_all_issued_items``. The
    remaining methods back the issue and return workflows.
    """

    @abstractmethod
    async def get_all_issued_items(self) -> list[IssuedItem]:
        """Retrieve every loan record, open and returned.

        Returns:
            List of IssuedItem objects ordered by id.

        Raises:
            Exception: If the backing store is unavailable.
        """

    @abstractmethod
    async def get_issued_item(self, issued_item_id: int) -> IssuedItem | None:
        """Retrieve a loan by id.

        Returns:
            IssuedItem if found, None otherwise.
        """

    @abstractmethod
    async def save_issued_item(self, issued_item: IssuedItem) -> None:
        """Create or update a loan record.

        Raises:
            Exception: If the referenced copy or member is unknown to the
                store, or the store is unavailable.
        """

    @abstractmethod
    async def next_issued_item_id(self) -> int:
        """Return an id not yet used by any loan."""


class CatalogStorePort(ABC):
    """Port for the catalog side of the store: items, members and copies."""

    @abstractmethod
    async def get_item(self, item_id: int) -> Item | None:
        """Retrieve an item by id, or None."""

    @abstractmethod
    async def get_all_items(self) -> list[Item]:
        """Retrieve every item ordered by id."""

    @abstractmethod
    async def save_item(self, item: Item) -> None:
        """Create or update an item."""

    @abstractmethod
    async def get_member(self, member_id: int) -> Member | None:
        """Retrieve a member by id, or None."""

    @abstractmethod
    async def save_member(self, member: Member) -> None:
        """Create or update a member."""

    @abstractmethod
    async def save_accession_record(self, record: AccessionRecord) -> None:
        """Create an accession record. The owning item must already exist."""

    @abstractmethod
    async def next_item_id(self) -> int:
        """Return an id not yet used by any item."""

    @abstractmethod
    async def next_member_id(self) -> int:
        """Return an id not yet used by any member."""

    @abstractmethod
    async def next_accession_record_id(self) -> int:
        """Return an id not yet used by any accession record."""


# ============================================================================
# DRIVING PORTS (Adapters/external systems call into core)
# ============================================================================


class CirculationPort(ABC):
    """Port for circulation desk operations.

    Driving port: the CLI invokes these methods. Implementations live in
    the core (circulation_service.py).
    """

    @abstractmethod
    async def get_all_issuable_records(self) -> list[AccessionRecord]:
        """Every accession record that is not on an open loan."""

    @abstractmethod
    async def get_random_issuable_record(self, item_id: int) -> AccessionRecord:
        """One available copy of the given item.

        Raises:
            NotFoundError: If no copy of the item is available.
        """

    @abstractmethod
    async def get_due_date(self, issued_item_id: int) -> datetime:
        """Due date of a loan.

        Raises:
            NotFoundError: If the loan doesn't exist.
            InvalidConfigurationError: If the member type has no loan period.
        """

    @abstractmethod
    async def get_late_fee(
        self, issued_item_id: int, now: datetime | None = None
    ) -> int:
        """Late fee currently owed on a loan.

        Raises:
            NotFoundError: If the loan doesn't exist.
        """

    @abstractmethod
    async def issue_item(
        self, item_id: int, member_id: int, now: datetime | None = None
    ) -> IssuedItem:
        """Lend an available copy of an item to a member.

        Raises:
            NotFoundError: If the member doesn't exist or no copy is available.
        """

    @abstractmethod
    async def return_item(
        self, issued_item_id: int, now: datetime | None = None
    ) -> ReturnReceipt:
        """Close a loan and report the fee owed.

        Raises:
            NotFoundError: If the loan doesn't exist.
            ValueError: If the loan was already returned.
        """

    @abstractmethod
    async def list_overdue(self, now: datetime | None = None) -> list[IssuedItem]:
        """Open loans whose due date has passed."""


class CatalogPort(ABC):
    """Port for catalog maintenance.

    Driving port: the CLI invokes these methods. Implementations live in
    the core (catalog_service.py).
    """

    @abstractmethod
    async def add_item(self, title: str) -> Item:
        """Register a new catalog item."""

    @abstractmethod
    async def add_accession_record(self, item_id: int) -> AccessionRecord:
        """Register a new physical copy of an existing item.

        Raises:
            NotFoundError: If the item doesn't exist.
        """

    @abstractmethod
    async def add_member(self, name: str, member_type: MemberType) -> Member:
        """Register a new member."""

    @abstractmethod
    async def get_inventory(self) -> list[InventoryLine]:
        """Total and available copy counts per item."""
