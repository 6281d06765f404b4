"""In-memory library store adapter.

Implements every store port with plain dictionaries. Nothing survives
the process, which makes it suitable for demos and quick sessions.
"""

import logging

from issuedesk.core.models import AccessionRecord, IssuedItem, Item, Member
from issuedesk.core.ports import (
    AccessionRecordStorePort,
    CatalogStorePort,
    IssuedItemStorePort,
)

logger = logging.getLogger(__name__)


class InMemoryLibraryStore(
    AccessionRecordStorePort, IssuedItemStorePort, CatalogStorePort
):
    """Dictionary-backed store for items, members, copies and loans."""

    def __init__(self) -> None:
        self._items: dict[int, Item] = {}
        self._members: dict[int, Member] = {}
        self._records: dict[int, AccessionRecord] = {}
        self._issued_items: dict[int, IssuedItem] = {}

    # items
    async def get_item(self, item_id: int) -> Item | None:
        return self._items.get(item_id)

    async def get_all_items(self) -> list[Item]:
        return [self._items[k] for k in sorted(self._items)]

    async def save_item(self, item: Item) -> None:
        self._items[item.item_id] = item

    async def next_item_id(self) -> int:
        return max(self._items, default=0) + 1

    # members
    async def get_member(self, member_id: int) -> Member | None:
        return self._members.get(member_id)

    async def save_member(self, member: Member) -> None:
        self._members[member.member_id] = member

    async def next_member_id(self) -> int:
        return max(self._members, default=0) + 1

    # accession records
    async def get_all_accession_records(self) -> list[AccessionRecord]:
        return [self._records[k] for k in sorted(self._records)]

    async def save_accession_record(self, record: AccessionRecord) -> None:
        if record.item.item_id not in self._items:
            raise ValueError(
                f"Item {record.item.item_id} must be saved before its accession records"
            )
        self._records[record.accession_record_id] = record

    async def next_accession_record_id(self) -> int:
        return max(self._records, default=0) + 1

    # issued items
    async def get_all_issued_items(self) -> list[IssuedItem]:
        return [self._issued_items[k] for k in sorted(self._issued_items)]

    async def get_issued_item(self, issued_item_id: int) -> IssuedItem | None:
        return self._issued_items.get(issued_item_id)

    async def save_issued_item(self, issued_item: IssuedItem) -> None:
        record_id = issued_item.accession_record.accession_record_id
        if record_id not in self._records:
            raise ValueError(f"Unknown accession record {record_id}")
        if issued_item.member.member_id not in self._members:
            raise ValueError(f"Unknown member {issued_item.member.member_id}")
        self._issued_items[issued_item.issued_item_id] = issued_item

    async def next_issued_item_id(self) -> int:
        return max(self._issued_items, default=0) + 1

    async def close(self) -> None:
        """Nothing to release; present so the composition root can close any store."""
        logger.debug("In-memory store closed")
