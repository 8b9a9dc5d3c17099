"""Tool-call dispatcher.

Parses raw arguments into the strict request models, routes to the handler
for the named tool, and normalizes failures into the ToolCallError taxonomy.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from . import reports
from .clients import crawler
from .clients.crawler import CrawlerSettings
from .errors import InternalToolError, InvalidParamsError, ToolCallError, UnknownToolError
from .models import AnalyzeRequest, CompareRequest, CrawlRequest
from .registry import ANALYZE_CRAWL_RESULTS, COMPARE_IMAGE_SETS, CRAWL_SAAS_IMAGES, get_tool
from .scoring import DEFAULT_SCORING_CONFIG, ScoringConfig

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err["loc"]) or "arguments"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


def parse_arguments(model: type[RequestT], arguments: Optional[dict[str, Any]], summary: str) -> RequestT:
    """Validate raw tool arguments into ``model`` or raise InvalidParamsError."""
    try:
        return model.model_validate(arguments or {})
    except ValidationError as exc:
        raise InvalidParamsError(f"{summary} ({_format_validation_error(exc)})") from exc


class ToolDispatcher:
    """Routes tool calls to handlers. Holds configuration only, no per-call state."""

    def __init__(
        self,
        settings: Optional[CrawlerSettings] = None,
        scoring_config: ScoringConfig = DEFAULT_SCORING_CONFIG,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or CrawlerSettings.from_env()
        self.scoring_config = scoring_config
        self._transport = transport
        self._handlers: dict[str, Callable[[Optional[dict[str, Any]]], Awaitable[str]]] = {
            CRAWL_SAAS_IMAGES: self.crawl_saas_images,
            ANALYZE_CRAWL_RESULTS: self.analyze_crawl_results,
            COMPARE_IMAGE_SETS: self.compare_image_sets,
        }

    async def dispatch(self, name: str, arguments: Optional[dict[str, Any]]) -> str:
        """Run tool ``name`` and return its text output."""
        if get_tool(name) is None:
            raise UnknownToolError(f"Unknown tool: {name}")
        handler = self._handlers[name]

        logger.info("Calling tool %s", name)
        try:
            return await handler(arguments)
        except InvalidParamsError as exc:
            logger.warning("Invalid params for %s: %s", name, exc.message)
            raise
        except ToolCallError:
            raise
        except Exception as exc:
            logger.exception("Tool %s failed", name)
            raise InternalToolError(f"Tool execution failed: {exc}") from exc

    async def crawl_saas_images(self, arguments: Optional[dict[str, Any]]) -> str:
        request = parse_arguments(CrawlRequest, arguments, f"Invalid arguments for {CRAWL_SAAS_IMAGES}")
        response = await crawler.crawl_site(
            request.url,
            request.force_refresh,
            settings=self.settings,
            transport=self._transport,
        )
        return reports.render_crawl_report(
            response.results,
            request.force_refresh,
            requested_url=request.url,
            raw=response.payload,
        )

    async def analyze_crawl_results(self, arguments: Optional[dict[str, Any]]) -> str:
        request = parse_arguments(AnalyzeRequest, arguments, f"Invalid arguments for {ANALYZE_CRAWL_RESULTS}")
        report = reports.build_analysis(request.results, request.focus, self.scoring_config)
        return reports.render_analysis(report)

    async def compare_image_sets(self, arguments: Optional[dict[str, Any]]) -> str:
        request = parse_arguments(CompareRequest, arguments, f"Invalid arguments for {COMPARE_IMAGE_SETS}")
        result = reports.build_comparison(
            request.website_a,
            request.website_b,
            request.comparison_type,
            self.scoring_config,
        )
        return reports.render_comparison(result)
