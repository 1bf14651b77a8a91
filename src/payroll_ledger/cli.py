"""Payroll ledger command line interface.

Provides operational tools for:
- Creating the database and its schema
- Ingesting a local time report CSV
- Printing the payroll report
- Serving the HTTP API

Usage:
    payroll-ledger init-db
    payroll-ledger upload ./time-report-42.csv
    payroll-ledger report --indent 2
    payroll-ledger serve
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Coroutine

from payroll_ledger.calculators.rate_resolver import PayRateTable
from payroll_ledger.config import Settings, get_settings
from payroll_ledger.database import (
    create_schema,
    dispose_db,
    ensure_database,
    get_session,
)
from payroll_ledger.exceptions import PayrollLedgerError
from payroll_ledger.services.report_service import PayrollReportService, render_report
from payroll_ledger.services.staging import stage_local_file
from payroll_ledger.services.upload_service import UPLOAD_SUCCESS_MESSAGE, UploadService

logger = logging.getLogger(__name__)


class LedgerCli:
    """Payroll ledger command line interface."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="payroll-ledger",
            description="Time report ingestion and payroll reporting",
        )
        parser.add_argument(
            "--log-level",
            default=self.settings.log_level,
            help="Logging level (default from LOG_LEVEL)",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        subparsers.add_parser(
            "init-db",
            help="Create the database and the report and ledger tables if missing",
        )

        upload = subparsers.add_parser(
            "upload",
            help="Ingest a time-report-<id>.csv file",
        )
        upload.add_argument(
            "path",
            type=Path,
            help="Path to the CSV file; the file itself is left in place",
        )

        report = subparsers.add_parser(
            "report",
            help="Print the payroll report as JSON",
        )
        report.add_argument(
            "--indent",
            type=int,
            default=None,
            help="Indent the JSON output",
        )

        subparsers.add_parser("serve", help="Run the HTTP API")

        return parser

    def run(self, argv: list[str] | None = None) -> int:
        """Run CLI with arguments."""
        args = self.parser.parse_args(argv)

        logging.basicConfig(
            level=args.log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        if not args.command:
            self.parser.print_help()
            return 1

        if args.command == "serve":
            from payroll_ledger.__main__ import main as serve

            serve()
            return 0

        commands: dict[str, Callable[[argparse.Namespace], Coroutine[Any, Any, int]]] = {
            "init-db": self._cmd_init_db,
            "upload": self._cmd_upload,
            "report": self._cmd_report,
        }
        return asyncio.run(self._run_async(commands[args.command], args))

    async def _run_async(
        self,
        command: Callable[[argparse.Namespace], Coroutine[Any, Any, int]],
        args: argparse.Namespace,
    ) -> int:
        try:
            return await command(args)
        except PayrollLedgerError as e:
            print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
            return 1
        finally:
            await dispose_db()

    async def _cmd_init_db(self, args: argparse.Namespace) -> int:
        """Create the database if missing, then the schema."""
        if await ensure_database(self.settings.database_url):
            print("Database created.")
        await create_schema()
        print("Database schema applied successfully.")
        return 0

    async def _cmd_upload(self, args: argparse.Namespace) -> int:
        """Ingest a local CSV through the same path as HTTP uploads."""
        source: Path = args.path
        if not source.is_file():
            print(f"Error: file not found: {source}", file=sys.stderr)
            return 1

        staged_path = stage_local_file(
            source, self.settings.upload_dir, self.settings.max_upload_bytes
        )
        async with get_session() as session:
            result = await UploadService(session).ingest(staged_path, source.name)

        print(
            f"{UPLOAD_SUCCESS_MESSAGE}: report {result.report_id}, "
            f"{result.entries_created} entries"
        )
        return 0

    async def _cmd_report(self, args: argparse.Namespace) -> int:
        """Print the payroll report."""
        rates = PayRateTable.from_string(self.settings.pay_rates)
        async with get_session() as session:
            lines = await PayrollReportService(session, rates).generate()

        print(json.dumps(render_report(lines), indent=args.indent))
        return 0


def main() -> None:
    """CLI entry point."""
    sys.exit(LedgerCli().run())


if __name__ == "__main__":
    main()
