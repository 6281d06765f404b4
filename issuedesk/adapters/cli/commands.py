"""CLI command implementations for the circulation desk.

This adapter maps CLI commands (issuable, pick, issue, return, due, fee,
overdue, inventory, add-item, add-copy, add-member) to CirculationPort and
CatalogPort operations. It handles CLI-specific formatting and error
reporting.
"""

import logging
from datetime import datetime
from typing import Any

from issuedesk.core.errors import IssueDeskError
from issuedesk.core.loan_policy import as_utc
from issuedesk.core.models import AccessionRecord, InventoryLine, IssuedItem, MemberType
from issuedesk.core.ports import CatalogPort, CirculationPort

logger = logging.getLogger(__name__)


def _record_to_dict(record: AccessionRecord) -> dict[str, Any]:
    return {
        "accession_record_id": record.accession_record_id,
        "item_id": record.item.item_id,
        "title": record.item.title,
    }


def _issued_to_dict(issued: IssuedItem) -> dict[str, Any]:
    return {
        "issued_item_id": issued.issued_item_id,
        "accession_record": _record_to_dict(issued.accession_record),
        "member_id": issued.member.member_id,
        "member_name": issued.member.name,
        "member_type": issued.member.member_type.value,
        "issue_date": issued.issue_date.isoformat(),
        "is_returned": issued.is_returned,
        "return_date": issued.return_date.isoformat() if issued.return_date else None,
        "late_fee_per_day": issued.late_fee_per_day,
    }


def _parse_now(value: str | None) -> datetime | None:
    """Parse an ISO timestamp; one without an offset is read as UTC."""
    return as_utc(datetime.fromisoformat(value)) if value else None


class CLICommandHandler:
    """Handles CLI commands by delegating to the circulation and catalog ports.

    Every method returns a result dictionary with a ``status`` of
    ``success`` or ``error``; domain errors never escape as exceptions.
    """

    def __init__(self, circulation: CirculationPort, catalog: CatalogPort):
        """Initialize the CLI command handler.

        Args:
            circulation: CirculationPort implementation for desk operations.
            catalog: CatalogPort implementation for catalog maintenance.
        """
        self.circulation = circulation
        self.catalog = catalog

    @staticmethod
    def _error(operation: str, error: Exception, **context: Any) -> dict[str, Any]:
        logger.error(f"Failed to {operation}: {error}")
        return {
            "status": "error",
            "operation": operation,
            **context,
            "message": str(error),
        }

    async def list_issuable(self) -> dict[str, Any]:
        """List every accession record that can be issued."""
        records = await self.circulation.get_all_issuable_records()
        return {
            "status": "success",
            "operation": "issuable",
            "count": len(records),
            "data": [_record_to_dict(r) for r in records],
        }

    async def pick_copy(self, item_id: int) -> dict[str, Any]:
        """Show which copy of an item would be handed out."""
        try:
            record = await self.circulation.get_random_issuable_record(item_id)
        except IssueDeskError as e:
            return self._error("pick", e, item_id=item_id)
        return {
            "status": "success",
            "operation": "pick",
            "data": _record_to_dict(record),
        }

    async def issue_item(
        self, item_id: int, member_id: int, verbose: bool = False
    ) -> dict[str, Any]:
        """Issue a copy of an item to a member.

        Args:
            item_id: Catalog item to lend.
            member_id: Borrowing member.
            verbose: If True, log additional information.

        Returns:
            Dictionary with status, the new loan and its due date.
        """
        try:
            issued = await self.circulation.issue_item(item_id, member_id)
            due = await self.circulation.get_due_date(issued.issued_item_id)
        except IssueDeskError as e:
            return self._error("issue", e, item_id=item_id, member_id=member_id)

        if verbose:
            logger.info(
                f"Issued item {issued.issued_item_id}",
                extra={"due_date": due.isoformat(), "verbose": True},
            )

        return {
            "status": "success",
            "operation": "issue",
            "message": f"Accession record {issued.accession_record.accession_record_id} "
            f"issued to member {member_id}",
            "data": _issued_to_dict(issued),
            "due_date": due.isoformat(),
        }

    async def return_item(self, issued_item_id: int) -> dict[str, Any]:
        """Take back a loan and report the fee owed."""
        try:
            receipt = await self.circulation.return_item(issued_item_id)
        except (IssueDeskError, ValueError) as e:
            return self._error("return", e, issued_item_id=issued_item_id)

        return {
            "status": "success",
            "operation": "return",
            "issued_item_id": issued_item_id,
            "due_date": receipt.due_date.isoformat(),
            "late_days": receipt.late_days,
            "fee": receipt.fee,
        }

    async def get_due_date(self, issued_item_id: int) -> dict[str, Any]:
        try:
            due = await self.circulation.get_due_date(issued_item_id)
        except IssueDeskError as e:
            return self._error("due", e, issued_item_id=issued_item_id)
        return {
            "status": "success",
            "operation": "due",
            "issued_item_id": issued_item_id,
            "due_date": due.isoformat(),
        }

    async def get_late_fee(
        self, issued_item_id: int, now: str | None = None
    ) -> dict[str, Any]:
        """Report the late fee on a loan, optionally as of an ISO timestamp."""
        try:
            fee = await self.circulation.get_late_fee(issued_item_id, _parse_now(now))
        except (IssueDeskError, ValueError) as e:
            return self._error("fee", e, issued_item_id=issued_item_id)
        return {
            "status": "success",
            "operation": "fee",
            "issued_item_id": issued_item_id,
            "fee": fee,
        }

    async def list_overdue(self) -> dict[str, Any]:
        loans = await self.circulation.list_overdue()
        return {
            "status": "success",
            "operation": "overdue",
            "count": len(loans),
            "data": [_issued_to_dict(loan) for loan in loans],
        }

    async def get_inventory(self, output_format: str = "json") -> dict[str, Any]:
        """Report copy counts per item.

        Args:
            output_format: Output format ('json', 'text'). Default 'json'.
        """
        lines = await self.catalog.get_inventory()

        if output_format == "json":
            data: Any = [
                {
                    "item_id": line.item.item_id,
                    "title": line.item.title,
                    "total_copies": line.total_copies,
                    "available_copies": line.available_copies,
                }
                for line in lines
            ]
        elif output_format == "text":
            data = self._format_inventory_as_text(lines)
        else:
            return {
                "status": "error",
                "operation": "inventory",
                "message": f"Unsupported format: {output_format}",
            }

        return {"status": "success", "operation": "inventory", "data": data}

    async def add_item(self, title: str) -> dict[str, Any]:
        try:
            item = await self.catalog.add_item(title)
        except ValueError as e:
            return self._error("add-item", e)
        return {
            "status": "success",
            "operation": "add-item",
            "data": {"item_id": item.item_id, "title": item.title},
        }

    async def add_copy(self, item_id: int) -> dict[str, Any]:
        try:
            record = await self.catalog.add_accession_record(item_id)
        except IssueDeskError as e:
            return self._error("add-copy", e, item_id=item_id)
        return {
            "status": "success",
            "operation": "add-copy",
            "data": _record_to_dict(record),
        }

    async def add_member(self, name: str, member_type: Any) -> dict[str, Any]:
        try:
            kind = MemberType(str(member_type).lower())
            member = await self.catalog.add_member(name, kind)
        except ValueError as e:
            return self._error("add-member", e, member_type=member_type)
        return {
            "status": "success",
            "operation": "add-member",
            "data": {
                "member_id": member.member_id,
                "name": member.name,
                "member_type": member.member_type.value,
            },
        }

    @staticmethod
    def _format_inventory_as_text(lines: list[InventoryLine]) -> str:
        """Format inventory lines as a human-readable table."""
        if not lines:
            return "No items in catalog."
        width = max(len(line.item.title) for line in lines)
        rows = [f"{'ID':>4}  {'Title':<{width}}  Total  Available"]
        for line in lines:
            rows.append(
                f"{line.item.item_id:>4}  {line.item.title:<{width}}  "
                f"{line.total_copies:>5}  {line.available_copies:>9}"
            )
        return "\n".join(rows)


async def run_command(
    handler: CLICommandHandler,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Run a CLI command.

    Entry point for executing CLI commands. Maps command names to handler methods.

    Args:
        handler: CLICommandHandler to dispatch to.
        command: Command name.
        args: Dictionary of command arguments.

    Returns:
        Dictionary with command result.

    Raises:
        ValueError: If command is not recognized or a required argument is missing.
    """

    def required(name: str) -> Any:
        if name not in args:
            raise ValueError(f"Missing required parameter: {name}")
        return args[name]

    if command == "issuable":
        return await handler.list_issuable()

    elif command == "pick":
        return await handler.pick_copy(int(required("item_id")))

    elif command == "issue":
        return await handler.issue_item(
            int(required("item_id")),
            int(required("member_id")),
            args.get("verbose", False),
        )

    elif command == "return":
        return await handler.return_item(int(required("issued_item_id")))

    elif command == "due":
        return await handler.get_due_date(int(required("issued_item_id")))

    elif command == "fee":
        return await handler.get_late_fee(
            int(required("issued_item_id")), args.get("now")
        )

    elif command == "overdue":
        return await handler.list_overdue()

    elif command == "inventory":
        return await handler.get_inventory(args.get("format", "json"))

    elif command == "add-item":
        return await handler.add_item(required("title"))

    elif command == "add-copy":
        return await handler.add_copy(int(required("item_id")))

    elif command == "add-member":
        return await handler.add_member(required("name"), required("member_type"))

    else:
        raise ValueError(f"Unknown command: {command}. Use 'help' for available commands.")
