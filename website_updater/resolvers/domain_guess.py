from typing import Optional
from loguru import logger

from website_updater.config import Settings
from website_updater.domains import generate_domain_patterns
from website_updater.liveness import http_responds, name_resolves
from website_updater.models import Confidence, ResolutionCandidate, Source


async def guess_domain(name: str, city: str, settings: Settings) -> Optional[ResolutionCandidate]:
    """
    Try generated domain patterns in order and return the first live one.

    A candidate must pass the DNS check before the HTTP check is attempted.

    Args:
        name (str): Company name.
        city (str): Company city, may be empty.
        settings (Settings): Run settings (liveness timeouts, www policy).

    Returns:
        Optional[ResolutionCandidate]: High-confidence candidate, or None when
        no pattern is live.
    """
    patterns = generate_domain_patterns(name, city or None, force_www=settings.force_www)
    if not patterns:
        logger.debug(f"No domain patterns for '{name}'")
        return None

    for host in patterns:
        if not await name_resolves(host, settings.dns_timeout):
            continue
        if not await http_responds(host, settings.http_timeout):
            logger.debug(f"{host} resolves but did not answer HTTP")
            continue
        logger.debug(f"✅ Domain guess hit for '{name}': {host}")
        return ResolutionCandidate(
            hostname=host,
            confidence=Confidence.HIGH,
            source=Source.DOMAIN_GUESS,
            alternates=[p for p in patterns if p != host],
        )

    logger.debug(f"No live domain among {len(patterns)} patterns for '{name}'")
    return None
