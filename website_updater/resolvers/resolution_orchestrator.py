# website_updater/resolvers/resolution_orchestrator.py

from typing import Optional
from loguru import logger

from website_updater.clients import OpenAIClient, SearchClient
from website_updater.config import Settings
from website_updater.models import CustomerRecord, ResolutionCandidate
from website_updater.resolvers.domain_guess import guess_domain
from website_updater.resolvers.llm_resolver import ai_resolve
from website_updater.resolvers.search_resolver import search_for_website


async def resolve_website(
    record: CustomerRecord,
    settings: Settings,
    search_client: Optional[SearchClient] = None,
    openai_client: Optional[OpenAIClient] = None,
) -> Optional[ResolutionCandidate]:
    """
    Run the enabled resolution tiers in priority order (domain guess, search,
    AI) and return the first candidate found.

    Args:
        record (CustomerRecord): Customer to resolve.
        settings (Settings): Run settings, including the per-tier toggles.
        search_client (Optional[SearchClient]): Client for the search tier.
        openai_client (Optional[OpenAIClient]): Client for the AI tier.

    Returns:
        Optional[ResolutionCandidate]: First tier hit, or None when every
        enabled tier came up empty.
    """
    if settings.enable_domain_guess:
        candidate = await guess_domain(record.name, record.city, settings)
        if candidate:
            return candidate

    if settings.enable_search and search_client is not None:
        candidate = await search_for_website(record, settings, search_client)
        if candidate:
            return candidate

    if settings.enable_ai:
        candidate = await ai_resolve(record, settings, openai_client)
        if candidate:
            return candidate

    logger.debug(f"No tier resolved a website for {record.code} ('{record.name}')")
    return None
