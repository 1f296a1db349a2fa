"""DNS and HTTP liveness checks for candidate hostnames."""
import asyncio
import dns.exception
import dns.resolver
from aiohttp import ClientSession, ClientTimeout, ClientError
from loguru import logger

USER_AGENT = "Mozilla/5.0 (compatible; website-updater/0.1)"


def _strip_www(host: str) -> str:
    return host[4:] if host.lower().startswith("www.") else host


async def name_resolves(host: str, timeout: float) -> bool:
    """
    Check whether a hostname has an A record.

    The "www." prefix is dropped before lookup. Any lookup error or timeout
    yields False.
    """
    name = _strip_www(host.strip())
    if not name:
        return False
    try:
        await asyncio.wait_for(
            asyncio.to_thread(dns.resolver.resolve, name, "A", lifetime=timeout),
            timeout=timeout,
        )
        return True
    except (asyncio.TimeoutError, dns.exception.DNSException) as e:
        logger.debug(f"🔎 DNS miss for {name}: {type(e).__name__}")
        return False
    except Exception as e:
        logger.debug(f"⚠️ DNS lookup failed for {name}: {e}")
        return False


async def http_responds(host: str, timeout: float) -> bool:
    """
    Send a HEAD request and report whether the site answers with 2xx or 3xx.

    Uses https:// unless the host string already carries an http:// scheme.
    Redirects are not followed; a redirect status counts as alive.
    """
    host = host.strip()
    if host.lower().startswith(("http://", "https://")):
        url = host
    else:
        url = f"https://{host}"

    try:
        async with ClientSession(timeout=ClientTimeout(total=timeout)) as session:
            async with session.head(
                url,
                allow_redirects=False,
                headers={"User-Agent": USER_AGENT},
            ) as resp:
                return 200 <= resp.status < 400
    except (asyncio.TimeoutError, ClientError) as e:
        logger.debug(f"🌐 HTTP check miss for {url}: {type(e).__name__}")
        return False
    except Exception as e:
        logger.debug(f"⚠️ HTTP check failed for {url}: {e}")
        return False
