"""Availability rules for accession records.

A copy is issuable when no open loan references it. Copies that have
never been lent out are issuable.
"""

from collections.abc import Iterable

from .models import AccessionRecord, IssuedItem


def open_loan_record_ids(issued_items: Iterable[IssuedItem]) -> set[int]:
    """Ids of the accession records that are currently out on loan."""
    return {
        issued.accession_record.accession_record_id
        for issued in issued_items
        if not issued.is_returned
    }


def issuable_accession_records(
    records: Iterable[AccessionRecord],
    issued_items: Iterable[IssuedItem],
) -> list[AccessionRecord]:
    """Return every record that is not on an open loan, in input order."""
    on_loan = open_loan_record_ids(issued_items)
    return [r for r in records if r.accession_record_id not in on_loan]


def issuable_records_for_item(
    records: Iterable[AccessionRecord],
    issued_items: Iterable[IssuedItem],
    item_id: int,
) -> list[AccessionRecord]:
    """Issuable records whose owning item is ``item_id``."""
    return [
        r
        for r in issuable_accession_records(records, issued_items)
        if r.item.item_id == item_id
    ]
