"""Catalog service: implements CatalogPort for catalog maintenance."""

import logging

from .availability import open_loan_record_ids
from .errors import NotFoundError
from .models import AccessionRecord, InventoryLine, Item, Member, MemberType
from .ports import (
    AccessionRecordStorePort,
    CatalogPort,
    CatalogStorePort,
    IssuedItemStorePort,
)

logger = logging.getLogger(__name__)


class CatalogService(CatalogPort):
    """Registers items, copies and members, and reports inventory."""

    def __init__(
        self,
        catalog: CatalogStorePort,
        accession_records: AccessionRecordStorePort,
        issued_items: IssuedItemStorePort,
    ):
        self.catalog = catalog
        self.accession_records = accession_records
        self.issued_items = issued_items

    async def add_item(self, title: str) -> Item:
        item = Item(item_id=await self.catalog.next_item_id(), title=title)
        await self.catalog.save_item(item)
        logger.info(f"Item {item.item_id} added", extra={"title": title})
        return item

    async def add_accession_record(self, item_id: int) -> AccessionRecord:
        item = await self.catalog.get_item(item_id)
        if item is None:
            raise NotFoundError(f"Item {item_id} not found")

        record = AccessionRecord(
            accession_record_id=await self.catalog.next_accession_record_id(),
            item=item,
        )
        await self.catalog.save_accession_record(record)
        logger.info(
            f"Accession record {record.accession_record_id} added for item {item_id}"
        )
        return record

    async def add_member(self, name: str, member_type: MemberType) -> Member:
        member = Member(
            member_id=await self.catalog.next_member_id(),
            name=name,
            member_type=member_type,
        )
        await self.catalog.save_member(member)
        logger.info(
            f"Member {member.member_id} added",
            extra={"member_type": member_type.value},
        )
        return member

    async def get_inventory(self) -> list[InventoryLine]:
        """Copy counts for every item, including items with no copies."""
        items = await self.catalog.get_all_items()
        records = await self.accession_records.get_all_accession_records()
        on_loan = open_loan_record_ids(await self.issued_items.get_all_issued_items())

        totals: dict[int, int] = {}
        available: dict[int, int] = {}
        for record in records:
            item_id = record.item.item_id
            totals[item_id] = totals.get(item_id, 0) + 1
            if record.accession_record_id not in on_loan:
                available[item_id] = available.get(item_id, 0) + 1

        return [
            InventoryLine(
                item=item,
                total_copies=totals.get(item.item_id, 0),
                available_copies=available.get(item.item_id, 0),
            )
            for item in items
        ]
