from typing import Optional
from loguru import logger

from website_updater.clients import OpenAIClient
from website_updater.config import Settings
from website_updater.domains import normalize_domain
from website_updater.models import Confidence, CustomerRecord, ResolutionCandidate, Source

NOT_FOUND = "NOT_FOUND"

SYSTEM_PROMPT = (
    "You identify the official website of a business. "
    "Respond with ONLY the bare domain name of its official website (for example: www.example.com), "
    f"with no protocol, path or explanation. If you are not confident, respond with ONLY {NOT_FOUND}."
)

PROMPT_TEMPLATE = """What is the official website domain for this business?

Business name: {name}
City: {city}
State: {state}
Phone: {phone}
"""


def parse_ai_answer(text: Optional[str], force_www: bool = True) -> Optional[str]:
    """Turn a model answer into a normalized hostname, or None for the not-found sentinel."""
    answer = (text or "").strip()
    if not answer or NOT_FOUND in answer.upper():
        return None
    return normalize_domain(answer, force_www) or None


async def ai_resolve(
    record: CustomerRecord,
    settings: Settings,
    client: Optional[OpenAIClient],
) -> Optional[ResolutionCandidate]:
    """
    Ask the language model for the business website as a last resort.

    Returns:
        Optional[ResolutionCandidate]: Medium-confidence candidate, or None
        for "not found" and for any failure.
    """
    if client is None:
        logger.debug("AI tier skipped: OPENAI_API_KEY not set")
        return None

    prompt = PROMPT_TEMPLATE.format(
        name=record.name or "Unknown",
        city=record.city or "Unknown",
        state=record.state or "Unknown",
        phone=record.phone or "Unknown",
    )
    try:
        resp = await client.chat_completions_create(
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0,
            max_tokens=50,
        )
        hostname = parse_ai_answer(resp.choices[0].message.content, settings.force_www)
    except Exception as e:
        logger.debug(f"⚠️ AI lookup failed for '{record.name}': {e}")
        return None

    if hostname is None:
        logger.debug(f"AI found no website for '{record.name}'")
        return None

    logger.debug(f"🤖 AI suggested {hostname} for '{record.name}'")
    return ResolutionCandidate(hostname=hostname, confidence=Confidence.MEDIUM, source=Source.AI)
