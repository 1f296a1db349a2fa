"""
Typed data models for the website resolution pipeline.
All data structures used throughout the codebase should be defined here.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Source(str, Enum):
    DOMAIN_GUESS = "domain_guess"
    SEARCH = "search"
    AI = "ai"
    MANUAL = "manual"


class OutcomeStatus(str, Enum):
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class CustomerRecord:
    """Customer record decoded from a directory service response."""
    code: str
    id: str = ""
    name: str = ""
    city: str = ""
    state: str = ""
    phone: str = ""
    current_website: str = ""

    @property
    def is_empty(self) -> bool:
        # Nothing usable came back from the lookup
        return not (self.id or self.code or self.name)


@dataclass
class ResolutionCandidate:
    """A hostname proposed by one of the resolution tiers."""
    hostname: str  # Not yet normalized
    confidence: Confidence
    source: Source
    alternates: List[str] = field(default_factory=list)  # Other hostnames considered, for audit


@dataclass(frozen=True)
class BatchInputRow:
    """One row of batch input: a bare code or a code pinned to a website."""
    code: str
    website: Optional[str] = None

    @property
    def pinned_website(self) -> Optional[str]:
        if self.website and self.website.strip():
            return self.website.strip()
        return None


@dataclass
class RunTally:
    """Counters for one batch invocation."""
    total: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0

    def record(self, status: OutcomeStatus) -> None:
        self.total += 1
        if status is OutcomeStatus.UPDATED:
            self.updated += 1
        elif status is OutcomeStatus.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1


@dataclass
class DetailedOutcome:
    """Final outcome for a single customer code."""
    code: str
    status: OutcomeStatus
    url: str = ""  # Only set for updated rows
    error: str = ""  # Failure message, or the skip reason for skipped rows

    def as_row(self) -> List[str]:
        return [self.code, self.status.value, self.url, self.error]


@dataclass(frozen=True)
class BatchOptions:
    """Decision flags for one batch invocation."""
    interactive: bool = False
    force_overwrite: bool = False  # Replace existing websites and bypass the confidence gate
    auto_confirm: bool = False  # Answer yes to every interactive prompt
    include_skipped: bool = True  # Keep skipped rows in the detailed outcomes
