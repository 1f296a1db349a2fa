from typing import Dict, List, Optional, Tuple
from urllib.parse import urlsplit
from loguru import logger

from website_updater.clients import SearchClient
from website_updater.config import Settings
from website_updater.domains import normalize_domain
from website_updater.models import Confidence, CustomerRecord, ResolutionCandidate, Source

MAX_RESULTS = 5

# Social networks, review sites and business directories are never the official site
BLOCKED_DOMAINS = (
    "facebook.com", "instagram.com", "twitter.com", "x.com", "linkedin.com", "youtube.com",
    "yelp.com", "yellowpages.com", "bbb.org", "manta.com", "mapquest.com", "bizapedia.com",
    "zoominfo.com", "dnb.com", "opencorporates.com", "google.com", "angi.com",
    "thumbtack.com", "nextdoor.com", "tripadvisor.com", "indeed.com", "glassdoor.com",
)


def build_search_query(record: CustomerRecord) -> str:
    parts = [record.name, record.city, record.state, "official website"]
    return " ".join(p.strip() for p in parts if p and p.strip())


def _link_host(link: str) -> str:
    try:
        host = urlsplit(link if "://" in link else f"https://{link}").hostname or ""
    except ValueError:
        return ""
    return host.lower()


def is_blocked(link: str) -> bool:
    host = _link_host(link)
    return any(host == d or host.endswith("." + d) for d in BLOCKED_DOMAINS)


def score_result(result: Dict[str, str]) -> int:
    """
    Score a single search result.

    +10 for a .com link, +5 for "official"/"home" in the title, +5 for
    "official website" in the snippet, -20 for a blocklisted domain.
    """
    link = (result.get("link") or "").lower()
    title = (result.get("title") or "").lower()
    snippet = (result.get("snippet") or "").lower()

    score = 0
    if ".com" in link:
        score += 10
    if "official" in title or "home" in title:
        score += 5
    if "official website" in snippet:
        score += 5
    if is_blocked(link):
        score -= 20
    return score


def rank_results(results: List[Dict[str, str]]) -> List[Tuple[int, Dict[str, str]]]:
    """Sort results by score, highest first. Ties keep provider order."""
    scored = [(score_result(r), r) for r in results]
    return sorted(scored, key=lambda pair: pair[0], reverse=True)


async def search_for_website(
    record: CustomerRecord,
    settings: Settings,
    client: SearchClient,
) -> Optional[ResolutionCandidate]:
    """
    Look the business up through the search API and pick the best-scored link.

    Args:
        record (CustomerRecord): Customer being resolved.
        settings (Settings): Run settings.
        client (SearchClient): Search API client.

    Returns:
        Optional[ResolutionCandidate]: Candidate with high confidence for
        scores of 10 or more, medium otherwise; None on error, no results or
        a negative top score.
    """
    if not client.configured:
        logger.debug("Search tier skipped: GOOGLE_CSE_KEY/GOOGLE_CX not set")
        return None

    query = build_search_query(record)
    try:
        results = await client.search(query, num=MAX_RESULTS)
    except Exception as e:
        logger.debug(f"⚠️ Search failed for '{record.name}': {e}")
        return None

    results = [r for r in results if r.get("link")]
    if not results:
        logger.debug(f"No search results for '{query}'")
        return None

    ranked = rank_results(results)
    top_score, top = ranked[0]
    if top_score < 0:
        logger.debug(f"Top search result for '{record.name}' is blocklisted ({top['link']})")
        return None

    alternates = [normalize_domain(r["link"], settings.force_www) for _, r in ranked]
    hostname = alternates[0]
    if not hostname:
        return None

    logger.debug(f"🔍 Search picked {hostname} (score {top_score}) for '{record.name}'")
    return ResolutionCandidate(
        hostname=hostname,
        confidence=Confidence.HIGH if top_score >= 10 else Confidence.MEDIUM,
        source=Source.SEARCH,
        alternates=alternates,
    )
