import html
import logging
import re
from typing import List, Optional
from urllib.parse import quote, urljoin, urlparse

import httpx

from app.core.config import settings
from app.models.news import ScrapedHeadline

logger = logging.getLogger(__name__)

# Hosts the proxy will fetch; anything else would make it an open proxy.
ALLOWED_HOSTS = frozenset(
    {
        "pib.gov.in",
        "timesofindia.indiatimes.com",
        "agricoop.nic.in",
        "icar.org.in",
        "kisanportal.org",
        "doordarshan.gov.in",
        "agmarknet.gov.in",
        "krishakjagat.org",
        "tractorguru.in",
        "pmkisan.gov.in",
    }
)

PROXY_USER_AGENT = "Kisan-Setu-Proxy/1.0"

PIB_RELEASES_URL = "https://pib.gov.in/AllRelease.aspx"
PIB_BASE_URL = "https://pib.gov.in"
TIMES_AGRICULTURE_URL = "https://timesofindia.indiatimes.com/topic/agriculture"
TIMES_BASE_URL = "https://timesofindia.indiatimes.com"

MAX_PIB_ITEMS = 15
MAX_TIMES_ITEMS = 10

_PIB_ABSOLUTE = re.compile(
    r"""href=['"](https://pib\.gov\.in/PressRelease(?:Page|Detail)\.aspx\?PRID=\d+)['"][^>]*>([^<]+?)</a>""",
    re.IGNORECASE,
)
_PIB_RELATIVE = re.compile(
    r"""href=['"](/PressRelease(?:Page|Detail)\.aspx\?PRID=\d+)['"][^>]*>([^<]+?)</a>""",
    re.IGNORECASE,
)
_TIMES_ARTICLE = re.compile(
    r"""href\s*=\s*"(?:https?://timesofindia\.indiatimes\.com)?((?:/[^"/]+)*/articleshow/\d+[^"]*\.cms)"[^>]*>([^<]+?)</a>""",
    re.IGNORECASE,
)
_TAG = re.compile(r"<[^>]+>")


class HostNotAllowedError(ValueError):
    pass


def validate_proxy_url(url: str) -> str:
    """Return the hostname of ``url`` if it may be fetched, else raise."""
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.hostname:
        raise ValueError(f"Invalid url: {url}")
    if parsed.hostname not in ALLOWED_HOSTS:
        raise HostNotAllowedError(parsed.hostname)
    return parsed.hostname


async def _check_request_host(request: httpx.Request) -> None:
    validate_proxy_url(str(request.url))


async def fetch_allowed_url(
    url: str, transport: Optional[httpx.AsyncBaseTransport] = None
) -> str:
    """Fetch an allow-listed page. Every redirect hop is checked too."""
    validate_proxy_url(url)
    async with httpx.AsyncClient(
        timeout=settings.PROXY_TIMEOUT_SECONDS,
        headers={"User-Agent": PROXY_USER_AGENT},
        follow_redirects=True,
        event_hooks={"request": [_check_request_host]},
        transport=transport,
    ) as client:
        response = await client.get(url)
        response.raise_for_status()
        return response.text


async def _fetch_page(url: str, transport: Optional[httpx.AsyncBaseTransport]) -> str:
    if settings.NEWS_PROXY_URL:
        async with httpx.AsyncClient(
            timeout=settings.PROXY_TIMEOUT_SECONDS, transport=transport
        ) as client:
            response = await client.get(f"{settings.NEWS_PROXY_URL}{quote(url, safe='')}")
            response.raise_for_status()
            return response.text
    return await fetch_allowed_url(url, transport=transport)


def _clean_title(raw: str) -> str:
    return html.unescape(_TAG.sub("", raw)).strip()


def parse_pib_releases(page: str, limit: int = MAX_PIB_ITEMS) -> List[ScrapedHeadline]:
    items: List[ScrapedHeadline] = []
    for match in _PIB_ABSOLUTE.finditer(page):
        title = _clean_title(match.group(2))
        if title:
            items.append(ScrapedHeadline(title=title, link=match.group(1)))
        if len(items) >= limit:
            return items

    if not items:
        for match in _PIB_RELATIVE.finditer(page):
            title = _clean_title(match.group(2))
            if title:
                items.append(ScrapedHeadline(title=title, link=PIB_BASE_URL + match.group(1)))
            if len(items) >= limit:
                break
    return items


def parse_times_articles(page: str, limit: int = MAX_TIMES_ITEMS) -> List[ScrapedHeadline]:
    items: List[ScrapedHeadline] = []
    for match in _TIMES_ARTICLE.finditer(page):
        title = _clean_title(match.group(2))
        if title:
            items.append(ScrapedHeadline(title=title, link=urljoin(TIMES_BASE_URL, match.group(1))))
        if len(items) >= limit:
            break
    return items


async def fetch_pib_press_releases(
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[ScrapedHeadline]:
    try:
        page = await _fetch_page(PIB_RELEASES_URL, transport)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Failed to fetch PIB press releases: %s", e)
        return []
    return parse_pib_releases(page)


async def fetch_times_of_india(
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[ScrapedHeadline]:
    try:
        page = await _fetch_page(TIMES_AGRICULTURE_URL, transport)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Failed to fetch Times of India articles: %s", e)
        return []
    return parse_times_articles(page)


def headlines_summary(items: List[ScrapedHeadline]) -> str:
    return "\n".join(f"- {item.title} ({item.link})" for item in items)
