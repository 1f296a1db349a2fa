import argparse
import asyncio
import csv
import os
import sys
from dataclasses import replace
from typing import List, Optional
from loguru import logger

from website_updater.batch import BatchProcessor
from website_updater.clients import DirectoryClient, OpenAIClient, SearchClient
from website_updater.config import LOG_LEVEL, Settings
from website_updater.exceptions import ConfigError, InputFileError
from website_updater.models import BatchInputRow, BatchOptions, DetailedOutcome
from website_updater.prompts import ConsolePrompter

OUTPUT_HEADER = ["code", "status", "url", "error"]


def parse_input_lines(lines: List[str]) -> List[BatchInputRow]:
    """
    Parse batch input lines. Blank lines and "#" comments are ignored; a single
    field is a bare code, two or more fields are (code, website).
    """
    rows = []
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        parts = [p.strip() for p in line.split(",")]
        if len(parts) == 1:
            rows.append(BatchInputRow(code=parts[0]))
        else:
            rows.append(BatchInputRow(code=parts[0], website=parts[1] or None))
    return rows


def load_rows_from_file(file_path: str) -> List[BatchInputRow]:
    """Load batch input rows from a file; a missing or unreadable file is fatal."""
    path = os.path.abspath(file_path)
    if not os.path.exists(path):
        raise InputFileError(f"File not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise InputFileError(f"Could not read {path}: {e}") from e
    rows = parse_input_lines(lines)
    logger.info(f"Loaded {len(rows)} rows from {path}")
    return rows


def parse_codes(codes: str) -> List[BatchInputRow]:
    return [BatchInputRow(code=c.strip()) for c in codes.split(",") if c.strip()]


def write_results_csv(output_path: str, outcomes: List[DetailedOutcome]) -> None:
    with open(output_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(OUTPUT_HEADER)
        for outcome in outcomes:
            writer.writerow(outcome.as_row())
    logger.info(f"Wrote {len(outcomes)} result rows to {output_path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="website-updater",
        description="Resolve customer websites and update them in the directory service.",
    )
    parser.add_argument("--file", help="File with customer codes or code,website rows")
    parser.add_argument("--codes", help="Comma-separated customer codes")
    parser.add_argument("--output", help="Write detailed results as CSV to this path")
    parser.add_argument("--username", help="Directory service username")
    parser.add_argument("--password", help="Directory service password")
    parser.add_argument("--companyID", dest="company_id", help="Directory service company ID")
    parser.add_argument("--endpoint", help="Directory service endpoint URL")
    parser.add_argument("--namespace", help="Directory service SOAP namespace")
    parser.add_argument("--force", action="store_true", help="Overwrite existing websites")
    parser.add_argument("--yes", action="store_true", help="Assume yes for all prompts")
    parser.add_argument("--non-interactive", action="store_true", help="Never prompt")
    parser.add_argument("--no-domain-guess", action="store_true", help="Disable domain guessing")
    parser.add_argument("--no-search", action="store_true", help="Disable the search tier")
    parser.add_argument("--no-ai", action="store_true", help="Disable the AI tier")
    parser.add_argument("--no-www", action="store_true", help="Do not force a www. prefix")
    parser.add_argument("--only-changes", action="store_true", help="Leave skipped rows out of --output")
    parser.add_argument("--verbose", action="store_true", help="Trace protocol exchanges")
    return parser


async def _complete_credentials(settings: Settings, prompter: ConsolePrompter) -> Settings:
    """Ask for any missing credentials in interactive mode."""
    username = settings.username or await prompter.ask("Enter username: ")
    password = settings.password or await prompter.ask("Enter password: ")
    company_id = settings.company_id or await prompter.ask("Enter company ID: ")
    return replace(settings, username=username, password=password, company_id=company_id)


async def _interactive_rows(prompter: ConsolePrompter) -> Optional[List[BatchInputRow]]:
    mode = await prompter.ask("\nProcess (1) single customer or (2) multiple customers? Enter 1 or 2: ")
    if mode == "1":
        code = await prompter.ask("Enter customer code: ")
        return parse_codes(code)
    if mode == "2":
        return parse_codes(await prompter.ask("Enter customer codes (comma-separated): "))
    logger.warning("Invalid option.")
    return None


async def main(argv: Optional[List[str]] = None) -> int:
    """
    Orchestrate one run.

    - Builds the run settings from the environment and CLI flags.
    - Loads rows from --file or --codes (unattended) or asks for them (interactive).
    - Processes every row, then logs the summary and optionally writes the result CSV.

    Returns:
        int: Process exit status.
    """
    args = build_parser().parse_args(argv)

    logger.remove()  # Remove default handler
    logger.add(
        sys.stderr,
        level="DEBUG" if args.verbose else LOG_LEVEL,
        format="<green>{time:HH:mm:ss}</green> | <level>{message}</level>",
    )

    unattended = bool(args.file or args.codes or args.non_interactive)
    prompter = ConsolePrompter()

    try:
        settings = Settings.from_env(
            username=args.username,
            password=args.password,
            company_id=args.company_id,
            endpoint=args.endpoint,
            namespace=args.namespace,
            enable_domain_guess=not args.no_domain_guess,
            enable_search=not args.no_search,
            enable_ai=not args.no_ai,
            force_www=not args.no_www,
            verbose=args.verbose,
        )

        if args.file:
            rows = load_rows_from_file(args.file)
        elif args.codes:
            rows = parse_codes(args.codes)
        else:
            rows = None

        if unattended:
            settings.require_credentials()
        else:
            settings = await _complete_credentials(settings, prompter)
            settings.require_credentials()
            if rows is None:
                rows = await _interactive_rows(prompter)
                if rows is None:
                    return 0
        if rows is None:
            raise InputFileError("No customer codes given; use --file or --codes")
    except (ConfigError, InputFileError) as e:
        logger.error(f"Fatal error: {e}")
        return 1

    logger.info("Customer Website Bulk Updater")

    directory = DirectoryClient(settings)
    search_client = SearchClient(settings) if settings.enable_search else None
    openai_client = OpenAIClient(settings) if settings.enable_ai and settings.openai_api_key else None

    processor = BatchProcessor(
        settings,
        directory,
        BatchOptions(
            interactive=not unattended,
            force_overwrite=args.force,
            auto_confirm=args.yes,
            include_skipped=not args.only_changes,
        ),
        prompter=prompter,
        search_client=search_client,
        openai_client=openai_client,
    )

    try:
        _, outcomes = await processor.process_customer_list(rows)
        if args.output:
            write_results_csv(args.output, outcomes)
    finally:
        # Cleanup: close sessions to prevent unclosed connector warnings
        await directory.close()
        if search_client:
            await search_client.close()
        if openai_client:
            await openai_client.close()

    return 0


def run():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
