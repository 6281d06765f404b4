"""Composition root for the IssueDesk circulation system.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Adapter instantiation
- Core service initialization
- Dependency injection
- Interactive desk loop
"""

import asyncio
import json
import logging
import sys
from dataclasses import dataclass

from issuedesk.adapters.cli.commands import CLICommandHandler, run_command
from issuedesk.adapters.store.memory import InMemoryLibraryStore
from issuedesk.adapters.store.sqlite import SQLiteLibraryStore
from issuedesk.config import Settings, load_settings
from issuedesk.core.catalog_service import CatalogService
from issuedesk.core.circulation_service import CirculationService
from issuedesk.core.issued_item_service import IssuedItemService
from issuedesk.core.loan_policy import LoanPolicy
from issuedesk.core.selection import build_strategy


@dataclass
class Application:
    """Wired application components."""

    store: InMemoryLibraryStore | SQLiteLibraryStore
    issued_item_service: IssuedItemService
    circulation: CirculationService
    catalog: CatalogService
    cli_handler: CLICommandHandler

    async def close(self) -> None:
        await self.store.close()


def build_application(settings: Settings) -> Application:
    """Instantiate adapters and core services from settings.

    Raises:
        ValueError: If the configured store backend is unknown.
    """
    logger = logging.getLogger(__name__)

    store: InMemoryLibraryStore | SQLiteLibraryStore
    if settings.store_backend == "sqlite":
        store = SQLiteLibraryStore(db_path=settings.store_sqlite_path)
        logger.info(f"Library store initialized: {settings.store_sqlite_path}")
    elif settings.store_backend == "memory":
        store = InMemoryLibraryStore()
        logger.info("Library store initialized: in-memory")
    else:
        raise ValueError(f"Unknown store backend: {settings.store_backend}")

    issued_item_service = IssuedItemService(
        accession_records=store,
        issued_items=store,
        policy=LoanPolicy(settings.loan_days()),
        selection=build_strategy(settings.selection_strategy, settings.selection_seed),
    )
    circulation = CirculationService(
        issued_item_service=issued_item_service,
        issued_items=store,
        catalog=store,
        default_late_fee_per_day=settings.default_late_fee_per_day,
    )
    catalog = CatalogService(
        catalog=store,
        accession_records=store,
        issued_items=store,
    )

    return Application(
        store=store,
        issued_item_service=issued_item_service,
        circulation=circulation,
        catalog=catalog,
        cli_handler=CLICommandHandler(circulation, catalog),
    )


async def _run_cli_interactive(cli_handler: CLICommandHandler) -> None:
    """Run interactive CLI loop.

    Reads ``command {json args}`` lines until ``exit`` or EOF.

    Args:
        cli_handler: CLICommandHandler instance for executing commands.
    """
    logger = logging.getLogger(__name__)
    logger.info("Starting desk CLI. Type 'help' for available commands or 'exit' to quit.")

    loop = asyncio.get_running_loop()

    while True:
        try:
            command_line = await loop.run_in_executor(None, input, "desk> ")
            command_line = command_line.strip()

            if not command_line:
                continue

            if command_line.lower() == "exit":
                logger.info("Exiting CLI")
                break

            if command_line.lower() == "help":
                _print_cli_help()
                continue

            parts = command_line.split(maxsplit=1)
            command = parts[0].lower()
            args_str = parts[1] if len(parts) > 1 else ""

            try:
                args = json.loads(args_str) if args_str else {}
            except json.JSONDecodeError:
                logger.error("Invalid JSON arguments. Use 'help' for command syntax.")
                continue

            try:
                result = await run_command(cli_handler, command, args)
                print(json.dumps(result, indent=2, default=str))
            except Exception as e:
                logger.error(f"Command execution error: {e}", exc_info=True)
                print(json.dumps({"status": "error", "message": str(e)}, indent=2))

        except EOFError:
            logger.info("EOF received, exiting CLI")
            break
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            continue


def _print_cli_help() -> None:
    """Print CLI help message."""
    help_text = """
Available Commands (JSON format):

  issuable
    List every copy that can be issued right now.

  pick
    Show which copy of an item would be handed out.
    Required: item_id

    Example: pick {"item_id": 1}

  issue
    Lend an available copy of an item to a member.
    Required: item_id, member_id

    Example: issue {"item_id": 1, "member_id": 100}

  return
    Take back a loan and report the late fee.
    Required: issued_item_id

    Example: return {"issued_item_id": 20}

  due
    Show the due date of a loan.
    Required: issued_item_id

  fee
    Show the late fee currently owed on a loan.
    Required: issued_item_id
    Optional: now (ISO timestamp)

  overdue
    List open loans past their due date.

  inventory
    Copy counts per item.
    Optional: format (json, text)

  add-item
    Required: title

  add-copy
    Required: item_id

  add-member
    Required: name, member_type (student, faculty)

    Example: add-member {"name": "Ada", "member_type": "faculty"}

  help
    Show this help message.

  exit
    Exit the CLI.
    """
    print(help_text)


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


async def bootstrap() -> None:
    """Load configuration, wire adapters, and start the desk CLI.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Instantiate adapters and core services
    4. Run the interactive loop
    """
    settings = load_settings()

    configure_logging("DEBUG" if settings.debug else settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info("Loading IssueDesk circulation system...")

    app = build_application(settings)
    try:
        await _run_cli_interactive(app.cli_handler)
    finally:
        await app.close()


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Successful shutdown
        1: Fatal bootstrap or runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
