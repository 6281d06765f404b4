"""Circulation service: implements CirculationPort for the desk.

Wraps the read-only IssuedItemService and adds the write side: issuing a
copy to a member and taking it back. All state changes are logged.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone

from .errors import NotFoundError
from .issued_item_service import IssuedItemService
from .loan_policy import as_utc
from .models import AccessionRecord, IssuedItem, ReturnReceipt
from .ports import CatalogStorePort, CirculationPort, IssuedItemStorePort

logger = logging.getLogger(__name__)


class CirculationService(CirculationPort):
    """Core implementation of CirculationPort."""

    def __init__(
        self,
        issued_item_service: IssuedItemService,
        issued_items: IssuedItemStorePort,
        catalog: CatalogStorePort,
        default_late_fee_per_day: int = 5,
    ):
        """Initialize the circulation service.

        Args:
            issued_item_service: Read-side availability and fee logic.
            issued_items: Port for loading and saving loans.
            catalog: Port for looking up members.
            default_late_fee_per_day: Rate stamped on every new loan.
        """
        if default_late_fee_per_day < 0:
            raise ValueError("default_late_fee_per_day must be non-negative")
        self.issued_item_service = issued_item_service
        self.issued_items = issued_items
        self.catalog = catalog
        self.default_late_fee_per_day = default_late_fee_per_day

    async def _require_issued_item(self, issued_item_id: int) -> IssuedItem:
        issued = await self.issued_items.get_issued_item(issued_item_id)
        if issued is None:
            raise NotFoundError(f"Issued item {issued_item_id} not found")
        return issued

    async def get_all_issuable_records(self) -> list[AccessionRecord]:
        return await self.issued_item_service.get_all_issuable_records()

    async def get_random_issuable_record(self, item_id: int) -> AccessionRecord:
        return await self.issued_item_service.get_random_issuable_record(item_id)

    async def get_due_date(self, issued_item_id: int) -> datetime:
        issued = await self._require_issued_item(issued_item_id)
        return self.issued_item_service.get_due_date(issued)

    async def get_late_fee(
        self, issued_item_id: int, now: datetime | None = None
    ) -> int:
        issued = await self._require_issued_item(issued_item_id)
        return self.issued_item_service.get_late_fee(issued, now)

    async def issue_item(
        self, item_id: int, member_id: int, now: datetime | None = None
    ) -> IssuedItem:
        """Lend an available copy of ``item_id`` to ``member_id``.

        Raises:
            NotFoundError: If the member doesn't exist or no copy is available.
        """
        member = await self.catalog.get_member(member_id)
        if member is None:
            raise NotFoundError(f"Member {member_id} not found")

        record = await self.issued_item_service.get_random_issuable_record(item_id)

        issued = IssuedItem(
            issued_item_id=await self.issued_items.next_issued_item_id(),
            accession_record=record,
            member=member,
            late_fee_per_day=self.default_late_fee_per_day,
            issue_date=now or datetime.now(timezone.utc),
        )
        await self.issued_items.save_issued_item(issued)

        logger.info(
            f"Issued accession record {record.accession_record_id} to member {member_id}",
            extra={
                "issued_item_id": issued.issued_item_id,
                "item_id": item_id,
                "member_id": member_id,
                "due_date": self.issued_item_service.get_due_date(issued).isoformat(),
            },
        )
        return issued

    async def return_item(
        self, issued_item_id: int, now: datetime | None = None
    ) -> ReturnReceipt:
        """Close a loan and report what it owes.

        Raises:
            NotFoundError: If the loan doesn't exist.
            ValueError: If the loan was already returned.
        """
        stored = await self._require_issued_item(issued_item_id)
        now = as_utc(now) if now else datetime.now(timezone.utc)

        # The stored loan stays open until the save goes through.
        returned = replace(stored)
        try:
            returned.mark_returned(now)
        except ValueError as e:
            raise ValueError(f"Cannot return issued item: {e}") from e

        await self.issued_items.save_issued_item(returned)

        receipt = ReturnReceipt(
            issued_item=returned,
            due_date=self.issued_item_service.get_due_date(returned),
            late_days=self.issued_item_service.get_late_days(returned),
            fee=self.issued_item_service.get_late_fee(returned),
        )
        logger.info(
            f"Issued item {issued_item_id} returned",
            extra={
                "issued_item_id": issued_item_id,
                "late_days": receipt.late_days,
                "fee": receipt.fee,
            },
        )
        return receipt

    async def list_overdue(self, now: datetime | None = None) -> list[IssuedItem]:
        now = now or datetime.now(timezone.utc)
        loans = await self.issued_items.get_all_issued_items()
        return [
            loan
            for loan in loans
            if self.issued_item_service.policy.is_overdue(loan, now)
        ]
