"""Client for the remote image-crawling endpoint.

POSTs ``{url, force_refresh}`` as JSON and expects a crawl result set back.
Client errors (4xx) carry ``{error, details?}``. One attempt per call, no retry.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ValidationError

from ..errors import CrawlGatewayError, InvalidParamsError
from ..models import CrawlResultSet

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://your-api-gateway-url.amazonaws.com/prod"
DEFAULT_TIMEOUT_SECONDS = 120.0


class CrawlerSettings(BaseModel):
    """Where the crawl endpoint lives and how to authenticate against it."""

    endpoint: str = DEFAULT_ENDPOINT
    api_key: Optional[str] = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> "CrawlerSettings":
        return cls(
            endpoint=os.environ.get("LAMBDA_ENDPOINT") or DEFAULT_ENDPOINT,
            api_key=os.environ.get("API_KEY") or None,
        )


class CrawlResponse(BaseModel):
    """Parsed result set plus the endpoint's JSON body exactly as received."""

    results: CrawlResultSet
    payload: dict[str, Any]


def _build_headers(api_key: Optional[str]) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers


def _client_error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and body.get("error"):
        message = f"Crawling failed: {body['error']}"
        if body.get("details"):
            message += f"\nDetails: {body['details']}"
        return message
    return f"Crawling failed: HTTP {response.status_code} {response.reason_phrase}"


async def crawl_site(
    url: str,
    force_refresh: bool = False,
    settings: Optional[CrawlerSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> CrawlResponse:
    """Run one remote crawl of ``url``; return the parsed result set and the raw body.

    Raises InvalidParamsError when the endpoint rejects the request (4xx) and
    CrawlGatewayError for everything else that goes wrong on the way.
    """
    settings = settings or CrawlerSettings.from_env()
    payload = {"url": url, "force_refresh": force_refresh}

    logger.info("Requesting crawl of %s (force_refresh=%s)", url, force_refresh)
    try:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(settings.timeout_seconds),
            transport=transport,
        ) as client:
            response = await client.post(settings.endpoint, json=payload, headers=_build_headers(settings.api_key))
    except httpx.HTTPError as exc:
        logger.warning("Crawl request for %s failed: %s", url, exc)
        raise CrawlGatewayError(f"Failed to crawl website: {str(exc) or type(exc).__name__}") from exc

    if response.is_client_error:
        message = _client_error_message(response)
        logger.warning("Crawl endpoint rejected %s: HTTP %d", url, response.status_code)
        raise InvalidParamsError(message)

    try:
        response.raise_for_status()
        data = response.json()
        result = CrawlResultSet.model_validate(data)
    except httpx.HTTPStatusError as exc:
        logger.warning("Crawl endpoint error for %s: HTTP %d", url, response.status_code)
        raise CrawlGatewayError(f"Failed to crawl website: {exc}") from exc
    except (ValueError, ValidationError) as exc:
        logger.warning("Malformed crawl response for %s: %s", url, exc)
        raise CrawlGatewayError(f"Failed to crawl website: malformed response ({exc})") from exc

    logger.info("Crawl of %s returned %d images", url, len(result.images))
    return CrawlResponse(results=result, payload=data)
