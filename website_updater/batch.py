"""
Batch processing of customer codes: fetch, decide, resolve, persist, tally.
"""
from typing import Iterable, List, Optional, Sequence, Tuple
from loguru import logger

from website_updater.clients import DirectoryClient, OpenAIClient, SearchClient
from website_updater.config import Settings
from website_updater.domains import normalize_domain
from website_updater.models import (
    BatchInputRow,
    BatchOptions,
    Confidence,
    CustomerRecord,
    DetailedOutcome,
    OutcomeStatus,
    RunTally,
)
from website_updater.prompts import Prompter
from website_updater.resolvers.resolution_orchestrator import resolve_website

BANNER = "=" * 40


def _skipped(code: str, reason: str) -> DetailedOutcome:
    logger.info(f"⏭️ {code}: skipped ({reason})")
    return DetailedOutcome(code=code, status=OutcomeStatus.SKIPPED, error=reason)


def _failed(code: str, error: str) -> DetailedOutcome:
    logger.error(f"Error processing customer {code}: {error}")
    return DetailedOutcome(code=code, status=OutcomeStatus.FAILED, error=error)


class BatchProcessor:
    """
    Processes customer rows one at a time against the directory service.

    Every record ends in exactly one of updated/skipped/failed. Failures are
    captured per record and never stop the run.
    """

    def __init__(
        self,
        settings: Settings,
        directory: DirectoryClient,
        options: BatchOptions,
        prompter: Optional[Prompter] = None,
        search_client: Optional[SearchClient] = None,
        openai_client: Optional[OpenAIClient] = None,
    ):
        if options.interactive and prompter is None:
            raise ValueError("A prompter is required for interactive runs")
        self.settings = settings
        self.directory = directory
        self.options = options
        self.prompter = prompter
        self.search_client = search_client
        self.openai_client = openai_client

    # Prompt helpers honoring auto_confirm

    async def _confirm(self, question: str) -> bool:
        if self.options.auto_confirm:
            return True
        return await self.prompter.confirm(question)

    async def _choose(self, question: str, choices: Sequence[str]) -> str:
        if self.options.auto_confirm:
            return choices[0]
        return await self.prompter.choose(question, choices)

    async def _ask(self, question: str) -> str:
        if self.options.auto_confirm:
            return ""
        return (await self.prompter.ask(question)).strip()

    @staticmethod
    def _log_record(record: CustomerRecord) -> None:
        logger.info(
            "\n--- Customer Information ---\n"
            f"ID: {record.id}\n"
            f"Code: {record.code}\n"
            f"Name: {record.name}\n"
            f"Location: {record.city}, {record.state}\n"
            f"Phone: {record.phone}\n"
            f"Current Website: {record.current_website or '(empty)'}\n"
            "---------------------------"
        )

    async def _resolve(self, record: CustomerRecord) -> Tuple[Optional[str], str]:
        """
        Run the resolution pipeline and apply the confidence gate.

        Returns:
            Tuple[Optional[str], str]: (accepted hostname, skip reason if None).
        """
        candidate = await resolve_website(record, self.settings, self.search_client, self.openai_client)

        if candidate is None:
            if not self.options.interactive:
                return None, "no website found"
            entered = await self._ask("No website found. Enter website URL (or press Enter to skip): ")
            return (entered or None), "no website entered"

        label = f"{candidate.confidence.value}, {candidate.source.value}"
        logger.info(f"Found {candidate.hostname} ({label})")
        if candidate.alternates:
            logger.debug(f"Alternates considered: {', '.join(candidate.alternates)}")

        if not self.options.interactive:
            if candidate.confidence is Confidence.HIGH or self.options.force_overwrite:
                return candidate.hostname, ""
            return None, f"low confidence ({label})"

        choice = await self._choose(
            f"Use {candidate.hostname} ({label}), enter one manually, or skip? u=use e=enter s=skip",
            ["u", "e", "s"],
        )
        if choice == "u":
            return candidate.hostname, ""
        if choice == "e":
            entered = await self._ask("Enter website URL (or press Enter to skip): ")
            return (entered or None), "no website entered"
        return None, "declined"

    async def process_customer(self, row: BatchInputRow) -> DetailedOutcome:
        """
        Process a single customer code through fetch, decision, resolution and save.

        Args:
            row (BatchInputRow): Customer code, optionally pinned to a website.

        Returns:
            DetailedOutcome: Terminal outcome for this code.
        """
        code = row.code
        try:
            record = await self.directory.fetch_customer(code)
        except Exception as e:
            return _failed(code, str(e))

        if record.is_empty:
            return _failed(code, f"customer {code} not found")

        self._log_record(record)

        website: Optional[str] = None
        if record.current_website.strip() and not self.options.force_overwrite:
            if not self.options.interactive:
                return _skipped(code, "website already exists")
            choice = await self._choose(
                "Website already exists. Overwrite, enter a new one, or skip? o=overwrite e=enter s=skip",
                ["o", "e", "s"],
            )
            if choice == "s":
                return _skipped(code, "website already exists")
            if choice == "e":
                website = await self._ask("Enter website URL (or press Enter to skip): ")
                if not website:
                    return _skipped(code, "no website entered")

        # A website pinned in the input bypasses the resolution pipeline
        if not website:
            website = row.pinned_website
        if not website:
            website, reason = await self._resolve(record)
            if not website:
                return _skipped(code, reason)

        normalized = normalize_domain(website, self.settings.force_www).lower()
        if not normalized:
            return _skipped(code, "empty website")
        logger.info(f"Normalized URL: {normalized}")

        if self.options.interactive and not await self._confirm(f"Save {normalized} for {code}?"):
            return _skipped(code, "declined")

        try:
            saved = await self.directory.save_customer_website(
                record.id, record.code, normalized, lookup_code=code
            )
        except Exception as e:
            return _failed(code, str(e))

        if not saved:
            return _failed(code, "save not acknowledged by directory service")

        logger.success(f"✓ {code}: website updated to {normalized}")
        return DetailedOutcome(code=code, status=OutcomeStatus.UPDATED, url=normalized)

    async def process_customer_list(
        self, rows: Iterable[BatchInputRow]
    ) -> Tuple[RunTally, List[DetailedOutcome]]:
        """
        Process rows in order and aggregate the results.

        Returns:
            Tuple[RunTally, List[DetailedOutcome]]: Counters covering every
            processed row, and the per-row outcomes (skipped rows dropped when
            options.include_skipped is False).
        """
        rows = list(rows)
        tally = RunTally()
        outcomes: List[DetailedOutcome] = []

        for i, row in enumerate(rows):
            logger.info(f"\n{BANNER}\nProcessing {i + 1} of {len(rows)}\n{BANNER}")

            outcome = await self.process_customer(row)
            tally.record(outcome.status)
            if outcome.status is not OutcomeStatus.SKIPPED or self.options.include_skipped:
                outcomes.append(outcome)

            if self.options.interactive and i < len(rows) - 1:
                if not await self._confirm("Continue to next customer?"):
                    break

        logger.info(
            f"\n{BANNER}\nSUMMARY\n{BANNER}\n"
            f"Total processed: {tally.total}\n"
            f"Updated: {tally.updated}\n"
            f"Skipped: {tally.skipped}\n"
            f"Failed: {tally.failed}\n"
            f"{BANNER}"
        )
        return tally, outcomes
