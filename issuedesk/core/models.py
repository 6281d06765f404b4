"""Domain models for the IssueDesk circulation system.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Item:
    """A catalog title. Physical copies are tracked as accession records."""

    item_id: int
    title: str

    def __post_init__(self) -> None:
        """Validate item invariants on creation."""
        if self.item_id < 1:
            raise ValueError(f"item_id must be positive, got {self.item_id}")
        if not self.title or not self.title.strip():
            raise ValueError("title must be a non-empty string")


@dataclass(frozen=True)
class AccessionRecord:
    """One physical, individually trackable copy of an Item."""

    accession_record_id: int
    item: Item

    def __post_init__(self) -> None:
        """Validate accession record invariants on creation."""
        if self.accession_record_id < 1:
            raise ValueError(
                f"accession_record_id must be positive, got {self.accession_record_id}"
            )


class MemberType(Enum):
    """Membership categories. Each one has its own loan period."""

    STUDENT = "student"
    FACULTY = "faculty"


@dataclass(frozen=True)
class Member:
    """A library member who can borrow copies."""

    member_id: int
    name: str
    member_type: MemberType

    def __post_init__(self) -> None:
        """Validate member invariants on creation."""
        if self.member_id < 1:
            raise ValueError(f"member_id must be positive, got {self.member_id}")


@dataclass
class IssuedItem:
    """A loan linking a Member to an AccessionRecord.

    A loan is open while ``is_returned`` is False. The only valid
    transition is OPEN -> RETURNED via ``mark_returned``.

    Note: This dataclass is intentionally mutable so the return flag
    and return date can be updated. ``issue_date`` is never reassigned.
    """

    issued_item_id: int
    accession_record: AccessionRecord
    member: Member
    late_fee_per_day: int = 0
    issue_date: datetime = field(default_factory=_utcnow)
    is_returned: bool = False
    return_date: datetime | None = None

    def __post_init__(self) -> None:
        """Validate loan invariants on creation or deserialization."""
        if self.issued_item_id < 1:
            raise ValueError(
                f"issued_item_id must be positive, got {self.issued_item_id}"
            )
        if self.late_fee_per_day < 0:
            raise ValueError(
                f"late_fee_per_day must be non-negative, got {self.late_fee_per_day}"
            )
        if self.return_date is not None and self.return_date < self.issue_date:
            raise ValueError(
                f"return_date ({self.return_date}) cannot be before "
                f"issue_date ({self.issue_date})"
            )

    @property
    def is_open(self) -> bool:
        """True while the copy is still out with the member."""
        return not self.is_returned

    def mark_returned(self, when: datetime | None = None) -> None:
        """Close the loan."""
        if self.is_returned:
            raise ValueError(f"Issued item {self.issued_item_id} is already returned")
        when = when or _utcnow()
        if when < self.issue_date:
            raise ValueError(
                f"Return date {when} cannot be before issue date {self.issue_date}"
            )
        self.is_returned = True
        self.return_date = when


@dataclass(frozen=True)
class ReturnReceipt:
    """Outcome of closing a loan."""

    issued_item: IssuedItem
    due_date: datetime
    late_days: int
    fee: int


@dataclass(frozen=True)
class InventoryLine:
    """Copy counts for one catalog item."""

    item: Item
    total_copies: int
    available_copies: int

    @property
    def issued_copies(self) -> int:
        return self.total_copies - self.available_copies
