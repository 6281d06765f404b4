"""Issued item service: read-side queries over copies and loans.

Answers three questions for the circulation desk:
- which accession records can be issued right now,
- which copy to hand out for a requested item,
- when a loan is due and what it owes in late fees.

The service never writes to the stores.
"""

import logging
from datetime import datetime

from .availability import issuable_accession_records, issuable_records_for_item
from .errors import NotFoundError
from .loan_policy import LoanPolicy
from .models import AccessionRecord, IssuedItem
from .ports import AccessionRecordStorePort, IssuedItemStorePort
from .selection import FirstMatchStrategy, SelectionStrategy

logger = logging.getLogger(__name__)


class IssuedItemService:
    """Availability, selection and fee computation for loans."""

    def __init__(
        self,
        accession_records: AccessionRecordStorePort,
        issued_items: IssuedItemStorePort,
        policy: LoanPolicy | None = None,
        selection: SelectionStrategy | None = None,
    ):
        """Initialize the issued item service.

        Args:
            accession_records: Port listing every physical copy.
            issued_items: Port listing every loan record.
            policy: Loan period and fee rules. Defaults to 7/90 days.
            selection: Strategy for picking among available copies.
                Defaults to first match.
        """
        self.accession_records = accession_records
        self.issued_items = issued_items
        self.policy = policy or LoanPolicy()
        self.selection = selection or FirstMatchStrategy()

    async def get_all_issuable_records(self) -> list[AccessionRecord]:
        """Every accession record with no open loan, including never-issued ones."""
        records = await self.accession_records.get_all_accession_records()
        loans = await self.issued_items.get_all_issued_items()
        return issuable_accession_records(records, loans)

    async def get_random_issuable_record(self, item_id: int) -> AccessionRecord:
        """Pick one available copy of ``item_id``.

        Raises:
            NotFoundError: If the item has no available copy, whether it has
                no copies at all or all of them are on loan.
        """
        records = await self.accession_records.get_all_accession_records()
        loans = await self.issued_items.get_all_issued_items()
        candidates = issuable_records_for_item(records, loans, item_id)
        if not candidates:
            raise NotFoundError(f"No issuable accession record for item {item_id}")

        chosen = self.selection.choose(candidates)
        logger.debug(
            f"Selected accession record {chosen.accession_record_id} for item {item_id}",
            extra={"item_id": item_id, "candidates": len(candidates)},
        )
        return chosen

    def get_due_date(self, issued_item: IssuedItem) -> datetime:
        """Date by which the loan must be returned.

        Raises:
            InvalidConfigurationError: If the member type has no loan period.
        """
        return self.policy.due_date(issued_item)

    def get_late_days(self, issued_item: IssuedItem, now: datetime | None = None) -> int:
        return self.policy.late_days(issued_item, now)

    def get_late_fee(self, issued_item: IssuedItem, now: datetime | None = None) -> int:
        """Fee owed for lateness; 0 while the loan is not yet due."""
        return self.policy.late_fee(issued_item, now)
