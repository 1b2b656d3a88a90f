import httpx
import pytest

from app.models.news import NewsSource, dedupe_sources
from app.services import news_sources
from app.services.news_sources import (
    HostNotAllowedError,
    fetch_allowed_url,
    fetch_pib_press_releases,
    headlines_summary,
    parse_pib_releases,
    parse_times_articles,
    validate_proxy_url,
)

PIB_PAGE = """
<ul>
  <li><a href="https://pib.gov.in/PressReleasePage.aspx?PRID=2001" target="_blank">Kharif MSP &amp; procurement</a></li>
  <li><a href='https://pib.gov.in/PressReleaseDetail.aspx?PRID=2002'>Soil Health Card milestone</a></li>
  <li><a href="https://example.com/other">Ignored</a></li>
</ul>
"""

PIB_RELATIVE_PAGE = """
<a href="/PressReleasePage.aspx?PRID=3001">Fertiliser stock update</a>
"""

TIMES_PAGE = """
<a href="/city/pune/onion-prices/articleshow/123456.cms" class="x">Onion prices crash in Lasalgaon</a>
<a href="https://timesofindia.indiatimes.com/india/monsoon/articleshow/654321.cms">Monsoon reaches Kerala</a>
<a href="/videos/other.cms">Not an article</a>
"""


def test_parse_pib_absolute_links():
    items = parse_pib_releases(PIB_PAGE)
    assert [i.title for i in items] == ["Kharif MSP & procurement", "Soil Health Card milestone"]
    assert items[0].link == "https://pib.gov.in/PressReleasePage.aspx?PRID=2001"


def test_parse_pib_relative_links_when_no_absolute_ones():
    items = parse_pib_releases(PIB_RELATIVE_PAGE)
    assert items[0].link == "https://pib.gov.in/PressReleasePage.aspx?PRID=3001"


def test_parse_pib_respects_limit():
    page = "".join(
        f'<a href="https://pib.gov.in/PressReleasePage.aspx?PRID={i}">Release {i}</a>'
        for i in range(30)
    )
    assert len(parse_pib_releases(page)) == 15


def test_parse_times_articles():
    items = parse_times_articles(TIMES_PAGE)
    assert [i.link for i in items] == [
        "https://timesofindia.indiatimes.com/city/pune/onion-prices/articleshow/123456.cms",
        "https://timesofindia.indiatimes.com/india/monsoon/articleshow/654321.cms",
    ]


def test_headlines_summary_lists_title_and_link():
    items = parse_times_articles(TIMES_PAGE)
    summary = headlines_summary(items)
    assert summary.splitlines()[0].startswith("- Onion prices crash in Lasalgaon (https://")


@pytest.mark.parametrize(
    "url",
    ["https://pib.gov.in/AllRelease.aspx", "https://pmkisan.gov.in/", "http://icar.org.in/news"],
)
def test_allowed_hosts(url):
    validate_proxy_url(url)


@pytest.mark.parametrize(
    "url",
    [
        "https://evil.example.com/",
        "https://pib.gov.in.evil.example.com/",
        "http://169.254.169.254/latest/meta-data",
    ],
)
def test_disallowed_hosts(url):
    with pytest.raises(HostNotAllowedError):
        validate_proxy_url(url)


@pytest.mark.parametrize("url", ["not a url", "ftp://pib.gov.in/file", "pib.gov.in/page"])
def test_invalid_urls(url):
    with pytest.raises(ValueError):
        validate_proxy_url(url)


async def test_fetch_allowed_url_returns_body_and_sends_user_agent():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["user_agent"] = request.headers["user-agent"]
        return httpx.Response(200, text="<html>ok</html>")

    body = await fetch_allowed_url(
        "https://pib.gov.in/AllRelease.aspx", transport=httpx.MockTransport(handler)
    )
    assert body == "<html>ok</html>"
    assert seen["user_agent"] == "Kisan-Setu-Proxy/1.0"


async def test_scraper_returns_empty_list_on_failure():
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    assert await fetch_pib_press_releases(transport=transport) == []


async def test_scraper_goes_through_configured_proxy(monkeypatch):
    monkeypatch.setattr(news_sources.settings, "NEWS_PROXY_URL", "https://proxy.test/raw?url=")
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        return httpx.Response(200, text=PIB_PAGE)

    items = await fetch_pib_press_releases(transport=httpx.MockTransport(handler))

    assert seen["url"].startswith("https://proxy.test/raw?url=https%3A%2F%2Fpib.gov.in")
    assert len(items) == 2


def test_dedupe_sources_keeps_first_seen_order_and_cap():
    sources = [
        NewsSource(title="a", uri="u1"),
        NewsSource(title="b", uri="u2"),
        NewsSource(title="a-dup", uri="u1"),
        NewsSource(title="c", uri="u3"),
    ]
    assert [s.title for s in dedupe_sources(sources)] == ["a", "b", "c"]
    assert [s.uri for s in dedupe_sources(sources, limit=2)] == ["u1", "u2"]


async def test_redirect_off_the_allow_list_is_refused():
    requested_hosts = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested_hosts.append(request.url.host)
        if request.url.host == "pib.gov.in":
            return httpx.Response(
                302, headers={"Location": "http://169.254.169.254/latest/meta-data"}
            )
        return httpx.Response(200, text="SECRET-METADATA")

    with pytest.raises(HostNotAllowedError):
        await fetch_allowed_url(
            "https://pib.gov.in/AllRelease.aspx", transport=httpx.MockTransport(handler)
        )
    assert requested_hosts == ["pib.gov.in"]


async def test_redirect_within_the_allow_list_is_followed():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://pib.gov.in/AllRelease.aspx"})
        return httpx.Response(200, text="<html>releases</html>")

    body = await fetch_allowed_url("https://pib.gov.in/old", transport=httpx.MockTransport(handler))
    assert body == "<html>releases</html>"
