"""Loan period and late fee rules.

This module implements the business rules that determine when a loan
is due back and how much a member owes once it is late.
"""

from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from types import MappingProxyType

from .errors import InvalidConfigurationError
from .models import IssuedItem, MemberType

DEFAULT_LOAN_DAYS: Mapping[MemberType, int] = MappingProxyType(
    {
        MemberType.STUDENT: 7,
        MemberType.FACULTY: 90,
    }
)


def as_utc(moment: datetime) -> datetime:
    """Read a naive timestamp as UTC; aware ones pass through unchanged."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class LoanPolicy:
    """Computes due dates and late fees for loans.

    Reads loans and returns values; never changes them.
    """

    def __init__(self, loan_days: Mapping[MemberType, int] | None = None):
        loan_days = dict(DEFAULT_LOAN_DAYS if loan_days is None else loan_days)
        for member_type, days in loan_days.items():
            if days <= 0:
                raise ValueError(
                    f"Loan period for {member_type.name} must be positive, got {days}"
                )
        self.loan_days: Mapping[MemberType, int] = MappingProxyType(loan_days)

    def loan_period(self, member_type: MemberType) -> timedelta:
        """How long a member of this type may keep a copy."""
        try:
            days = self.loan_days[member_type]
        except KeyError:
            raise InvalidConfigurationError(
                f"No loan period configured for member type {member_type!r}"
            ) from None
        return timedelta(days=days)

    def due_date(self, issued_item: IssuedItem) -> datetime:
        """Issue date plus the loan period for the borrower's member type."""
        return issued_item.issue_date + self.loan_period(issued_item.member.member_type)

    def late_days(self, issued_item: IssuedItem, now: datetime | None = None) -> int:
        """Whole days elapsed since the due date, never negative.

        A returned loan stops accruing at its return date.
        """
        if issued_item.is_returned and issued_item.return_date is not None:
            now = issued_item.return_date
        elif now is None:
            now = datetime.now(timezone.utc)

        overdue = as_utc(now) - as_utc(self.due_date(issued_item))
        if overdue <= timedelta(0):
            return 0
        return overdue.days

    def late_fee(self, issued_item: IssuedItem, now: datetime | None = None) -> int:
        """Late days times the loan's per-day rate."""
        return self.late_days(issued_item, now) * issued_item.late_fee_per_day

    def is_overdue(self, issued_item: IssuedItem, now: datetime | None = None) -> bool:
        """Is this loan still open past its due date?"""
        if issued_item.is_returned:
            return False
        now = now or datetime.now(timezone.utc)
        return as_utc(now) > as_utc(self.due_date(issued_item))
