"""Unit tests for due date and late fee rules."""

from datetime import datetime, timedelta, timezone

import pytest

from issuedesk.core.errors import InvalidConfigurationError
from issuedesk.core.loan_policy import DEFAULT_LOAN_DAYS, LoanPolicy
from issuedesk.core.models import AccessionRecord, IssuedItem, Item, Member, MemberType

ISSUED_AT = datetime(2024, 3, 1, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def record() -> AccessionRecord:
    return AccessionRecord(accession_record_id=10, item=Item(item_id=1, title="Item To Issue"))


@pytest.fixture
def student() -> Member:
    return Member(member_id=1, name="Student", member_type=MemberType.STUDENT)


@pytest.fixture
def faculty() -> Member:
    return Member(member_id=2, name="Faculty", member_type=MemberType.FACULTY)


@pytest.fixture
def policy() -> LoanPolicy:
    return LoanPolicy()


def _loan(
    record: AccessionRecord,
    member: Member,
    issue_date: datetime = ISSUED_AT,
    late_fee_per_day: int = 5,
) -> IssuedItem:
    return IssuedItem(
        issued_item_id=21,
        accession_record=record,
        member=member,
        late_fee_per_day=late_fee_per_day,
        issue_date=issue_date,
    )


class TestDueDate:
    def test_student_due_in_seven_days(
        self, policy: LoanPolicy, record: AccessionRecord, student: Member
    ) -> None:
        loan = _loan(record, student)
        assert policy.due_date(loan) == ISSUED_AT + timedelta(days=7)

    def test_faculty_due_in_ninety_days(
        self, policy: LoanPolicy, record: AccessionRecord, faculty: Member
    ) -> None:
        loan = _loan(record, faculty)
        assert policy.due_date(loan) == ISSUED_AT + timedelta(days=90)

    def test_due_date_with_default_issue_date(
        self, policy: LoanPolicy, record: AccessionRecord, student: Member
    ) -> None:
        loan = IssuedItem(issued_item_id=21, accession_record=record, member=student)
        assert (policy.due_date(loan) - loan.issue_date).days == 7

    def test_custom_loan_periods(
        self, record: AccessionRecord, student: Member, faculty: Member
    ) -> None:
        policy = LoanPolicy({MemberType.STUDENT: 14, MemberType.FACULTY: 30})
        assert policy.due_date(_loan(record, student)) == ISSUED_AT + timedelta(days=14)
        assert policy.due_date(_loan(record, faculty)) == ISSUED_AT + timedelta(days=30)

    def test_missing_member_type_is_configuration_error(
        self, record: AccessionRecord, faculty: Member
    ) -> None:
        policy = LoanPolicy({MemberType.STUDENT: 7})
        with pytest.raises(InvalidConfigurationError, match="FACULTY"):
            policy.due_date(_loan(record, faculty))

    def test_non_positive_loan_period_rejected(self) -> None:
        with pytest.raises(ValueError, match="must be positive"):
            LoanPolicy({MemberType.STUDENT: 0, MemberType.FACULTY: 90})

    def test_default_table_covers_every_member_type(self) -> None:
        assert set(DEFAULT_LOAN_DAYS) == set(MemberType)


class TestLateFee:
    def test_student_ten_days_out_owes_three_days(
        self, policy: LoanPolicy, record: AccessionRecord, student: Member
    ) -> None:
        now = ISSUED_AT + timedelta(days=10)
        loan = _loan(record, student)

        assert policy.late_days(loan, now) == 3
        assert policy.late_fee(loan, now) == 15

    def test_late_fee_against_wall_clock(
        self, policy: LoanPolicy, record: AccessionRecord, student: Member
    ) -> None:
        ten_days_ago = datetime.now(timezone.utc) - timedelta(days=10)
        loan = _loan(record, student, issue_date=ten_days_ago)

        late_days = (datetime.now(timezone.utc) - policy.due_date(loan)).days

        assert late_days == 3
        assert policy.late_fee(loan) == 5 * late_days

    def test_not_yet_due_owes_nothing(
        self, policy: LoanPolicy, record: AccessionRecord, faculty: Member
    ) -> None:
        now = ISSUED_AT + timedelta(days=30)
        assert policy.late_fee(_loan(record, faculty), now) == 0

    def test_exactly_at_due_date_owes_nothing(
        self, policy: LoanPolicy, record: AccessionRecord, student: Member
    ) -> None:
        now = ISSUED_AT + timedelta(days=7)
        assert policy.late_fee(_loan(record, student), now) == 0

    def test_partial_days_are_floored(
        self, policy: LoanPolicy, record: AccessionRecord, student: Member
    ) -> None:
        now = ISSUED_AT + timedelta(days=9, hours=23)
        assert policy.late_days(_loan(record, student), now) == 2

    def test_returned_loan_stops_accruing(
        self, policy: LoanPolicy, record: AccessionRecord, student: Member
    ) -> None:
        loan = _loan(record, student)
        loan.mark_returned(ISSUED_AT + timedelta(days=9))

        much_later = ISSUED_AT + timedelta(days=60)

        assert policy.late_fee(loan, much_later) == 10

    def test_zero_rate_means_zero_fee(
        self, policy: LoanPolicy, record: AccessionRecord, student: Member
    ) -> None:
        loan = _loan(record, student, late_fee_per_day=0)
        assert policy.late_fee(loan, ISSUED_AT + timedelta(days=30)) == 0

    def test_naive_now_is_read_as_utc(
        self, policy: LoanPolicy, record: AccessionRecord, student: Member
    ) -> None:
        naive_now = (ISSUED_AT + timedelta(days=10)).replace(tzinfo=None)
        loan = _loan(record, student)

        assert policy.late_days(loan, naive_now) == 3
        assert policy.late_fee(loan, naive_now) == 15


class TestIsOverdue:
    def test_open_loan_past_due(
        self, policy: LoanPolicy, record: AccessionRecord, student: Member
    ) -> None:
        assert policy.is_overdue(_loan(record, student), ISSUED_AT + timedelta(days=8))

    def test_naive_now_compares_against_aware_due_date(
        self, policy: LoanPolicy, record: AccessionRecord, student: Member
    ) -> None:
        naive_now = (ISSUED_AT + timedelta(days=8)).replace(tzinfo=None)
        assert policy.is_overdue(_loan(record, student), naive_now)

    def test_returned_loan_is_never_overdue(
        self, policy: LoanPolicy, record: AccessionRecord, student: Member
    ) -> None:
        loan = _loan(record, student)
        loan.mark_returned(ISSUED_AT + timedelta(days=20))
        assert not policy.is_overdue(loan, ISSUED_AT + timedelta(days=30))
