"""
Hostname normalization and candidate domain generation.

Both functions are pure: no network access happens here.
"""
import re
from typing import List, Optional
from urllib.parse import urlsplit

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)
_STRIP_PREFIX_RE = re.compile(r"^(https?://)?(www\.)?", re.IGNORECASE)

# Trailing corporate suffixes, compared after punctuation is removed ("Inc." -> "inc")
CORPORATE_SUFFIXES = {
    "inc", "llc", "corp", "ltd", "limited", "incorporated", "corporation", "company", "co",
}


def _apply_www(host: str, force_www: bool) -> str:
    if force_www and host and not host.lower().startswith("www."):
        return f"www.{host}"
    return host


def _host_from_url(url: str) -> Optional[str]:
    """Pull the host out of a URL, keeping its original case. None if unusable."""
    try:
        parts = urlsplit(url if _SCHEME_RE.match(url) else f"https://{url}")
        parts.port  # Raises ValueError on a malformed port
    except ValueError:
        return None
    netloc = parts.netloc.rsplit("@", 1)[-1]
    if "[" in netloc or "]" in netloc:
        return None
    host = netloc.split(":", 1)[0]
    if not host or any(ch.isspace() for ch in host):
        return None
    return host


def normalize_domain(raw: Optional[str], force_www: bool = True) -> str:
    """
    Canonicalize a URL or host string into a bare hostname.

    The result carries no scheme, path or trailing slash. Case is preserved;
    callers lowercase before persisting. Normalizing an already normalized
    hostname returns it unchanged.

    Args:
        raw (Optional[str]): URL or hostname as typed or returned by a tier.
        force_www (bool): Prefix "www." when the host lacks it.

    Returns:
        str: Normalized hostname, or "" for empty input.
    """
    if not raw:
        return ""
    raw = raw.strip()
    if not raw:
        return ""

    host = _host_from_url(raw)
    if host is not None:
        return _apply_www(host, force_www)

    # Textual fallback for strings urlsplit cannot make sense of
    stripped = re.split(r"[/?#]", _STRIP_PREFIX_RE.sub("", raw), maxsplit=1)[0]
    if not re.search(r"[^\W_]", stripped):
        # Nothing host-like left ("?x", "#frag")
        return ""
    return _apply_www(stripped, force_www)


def _clean_company_name(company_name: str) -> List[str]:
    """Case-fold, drop a leading "The", punctuation and trailing corporate suffixes."""
    clean = company_name.lower().strip()
    clean = re.sub(r"[^a-z0-9 \-]", "", clean)
    words = clean.replace("-", " ").split()
    if words and words[0] == "the":
        words = words[1:]
    while words and words[-1] in CORPORATE_SUFFIXES:
        words.pop()
    return words


def _split_digit_runs(word: str) -> List[str]:
    # "4print" -> ["4", "print"]
    return re.findall(r"[0-9]+|[a-z]+", word)


def generate_domain_patterns(
    company_name: str,
    city: Optional[str] = None,
    force_www: bool = True,
) -> List[str]:
    """
    Derive an ordered, deduplicated list of candidate hostnames for a company.

    Candidates, in order: words joined, words hyphenated (digit runs split off),
    words joined with digits removed, then city+name and name+city when a city
    is given. Every candidate gets ".com" and the "www." policy.

    Example:
        >>> generate_domain_patterns("4Print Wraps, Inc.", "Glenburnie")
        ['www.4printwraps.com', 'www.4-print-wraps.com', 'www.printwraps.com',
         'www.glenburnie4printwraps.com', 'www.4printwrapsglenburnie.com']
    """
    words = _clean_company_name(company_name or "")
    if not words:
        return []

    joined = "".join(words)
    hyphenated = "-".join(part for word in words for part in _split_digit_runs(word))
    no_digits = re.sub(r"[0-9]", "", joined)

    bases = [joined, hyphenated, no_digits]

    city_clean = re.sub(r"[^a-z0-9]", "", (city or "").lower())
    if city_clean:
        bases.append(city_clean + joined)
        bases.append(joined + city_clean)

    candidates: List[str] = []
    seen = set()
    for base in bases:
        if not base:
            continue
        host = _apply_www(f"{base}.com", force_www)
        if host not in seen:
            seen.add(host)
            candidates.append(host)
    return candidates
