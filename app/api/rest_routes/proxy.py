import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Query
from fastapi.responses import HTMLResponse, PlainTextResponse

from app.services.news_sources import (
    HostNotAllowedError,
    fetch_allowed_url,
    validate_proxy_url,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Proxy"])


@router.get("/proxy")
async def proxy(url: Optional[str] = Query(default=None, description="Page to fetch")):
    """
    Fetch an allow-listed agriculture news page and return its body verbatim.
    """
    if not url:
        return PlainTextResponse("Missing url parameter", status_code=400)

    try:
        validate_proxy_url(url)
    except HostNotAllowedError:
        return PlainTextResponse("Host not allowed", status_code=403)
    except ValueError:
        return PlainTextResponse("Invalid url parameter", status_code=400)

    try:
        body = await fetch_allowed_url(url)
    except HostNotAllowedError as e:
        logger.warning("proxy redirect for %s left the allow-list: %s", url, e)
        return PlainTextResponse("Host not allowed", status_code=403)
    except httpx.HTTPError as e:
        logger.error("proxy error for %s: %s", url, e)
        return PlainTextResponse("Failed to fetch", status_code=500)
    return HTMLResponse(body)
