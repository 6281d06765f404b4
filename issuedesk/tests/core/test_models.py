"""Unit tests for domain model invariants and the loan lifecycle."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from issuedesk.core.models import (
    AccessionRecord,
    InventoryLine,
    IssuedItem,
    Item,
    Member,
    MemberType,
)

ISSUED_AT = datetime(2024, 3, 1, tzinfo=timezone.utc)


@pytest.fixture
def issued_item() -> IssuedItem:
    return IssuedItem(
        issued_item_id=20,
        accession_record=AccessionRecord(
            accession_record_id=10, item=Item(item_id=1, title="Item To Issue")
        ),
        member=Member(member_id=100, name="Test Member", member_type=MemberType.FACULTY),
        late_fee_per_day=5,
        issue_date=ISSUED_AT,
    )


class TestValidation:
    def test_item_requires_positive_id(self) -> None:
        with pytest.raises(ValueError, match="item_id"):
            Item(item_id=0, title="x")

    def test_item_requires_title(self) -> None:
        with pytest.raises(ValueError, match="title"):
            Item(item_id=1, title="   ")

    def test_accession_record_requires_positive_id(self) -> None:
        with pytest.raises(ValueError, match="accession_record_id"):
            AccessionRecord(accession_record_id=-1, item=Item(item_id=1, title="x"))

    def test_member_requires_positive_id(self) -> None:
        with pytest.raises(ValueError, match="member_id"):
            Member(member_id=0, name="x", member_type=MemberType.STUDENT)

    def test_negative_late_fee_rejected(self, issued_item: IssuedItem) -> None:
        with pytest.raises(ValueError, match="late_fee_per_day"):
            IssuedItem(
                issued_item_id=1,
                accession_record=issued_item.accession_record,
                member=issued_item.member,
                late_fee_per_day=-1,
            )

    def test_accession_record_is_immutable(self, issued_item: IssuedItem) -> None:
        with pytest.raises(FrozenInstanceError):
            issued_item.accession_record.accession_record_id = 99  # type: ignore[misc]

    def test_default_issue_date_is_now(self, issued_item: IssuedItem) -> None:
        before = datetime.now(timezone.utc)
        fresh = IssuedItem(
            issued_item_id=1,
            accession_record=issued_item.accession_record,
            member=issued_item.member,
        )
        assert before <= fresh.issue_date <= datetime.now(timezone.utc)
        assert fresh.is_open


class TestLoanLifecycle:
    def test_mark_returned(self, issued_item: IssuedItem) -> None:
        when = ISSUED_AT + timedelta(days=3)

        issued_item.mark_returned(when)

        assert issued_item.is_returned
        assert not issued_item.is_open
        assert issued_item.return_date == when
        assert issued_item.issue_date == ISSUED_AT

    def test_cannot_return_twice(self, issued_item: IssuedItem) -> None:
        issued_item.mark_returned(ISSUED_AT + timedelta(days=1))
        with pytest.raises(ValueError, match="already returned"):
            issued_item.mark_returned(ISSUED_AT + timedelta(days=2))

    def test_cannot_return_before_issue(self, issued_item: IssuedItem) -> None:
        with pytest.raises(ValueError, match="before issue date"):
            issued_item.mark_returned(ISSUED_AT - timedelta(days=1))
        assert issued_item.is_open


def test_inventory_line_issued_copies() -> None:
    line = InventoryLine(item=Item(item_id=1, title="x"), total_copies=4, available_copies=1)
    assert line.issued_copies == 3
