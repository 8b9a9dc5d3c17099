"""Tool registry: names, descriptions, and input schemas for capability discovery."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from .models import AnalysisFocus, ComparisonType

CRAWL_SAAS_IMAGES = "crawl_saas_images"
ANALYZE_CRAWL_RESULTS = "analyze_crawl_results"
COMPARE_IMAGE_SETS = "compare_image_sets"


class ToolSpec(BaseModel):
    """A callable tool as advertised to the client."""

    name: str
    title: str
    description: str
    input_schema: dict[str, Any]
    read_only: bool = True
    open_world: bool = False


_RESULT_SET_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "source_url": {"type": "string"},
        "generated_at": {"type": "string"},
        "images": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "url": {"type": "string"},
                    "alt": {"type": "string"},
                    "landing_page": {"type": "string"},
                    "hash": {"type": "string"},
                },
                "required": ["url", "hash"],
            },
        },
    },
    "required": ["images"],
}


def _result_set_schema(description: str) -> dict[str, Any]:
    return {**_RESULT_SET_SCHEMA, "description": description}


TOOLS: list[ToolSpec] = [
    ToolSpec(
        name=CRAWL_SAAS_IMAGES,
        title="Crawl SaaS Images",
        description="Crawl a SaaS website to extract and analyze product images",
        input_schema={
            "type": "object",
            "properties": {
                "url": {
                    "type": "string",
                    "description": "The URL of the SaaS website to crawl (must start with http:// or https://)",
                },
                "force_refresh": {
                    "type": "boolean",
                    "description": "Force refresh of cached data (default: false)",
                    "default": False,
                },
            },
            "required": ["url"],
        },
        open_world=True,
    ),
    ToolSpec(
        name=ANALYZE_CRAWL_RESULTS,
        title="Analyze Crawl Results",
        description="Analyze and summarize crawling results",
        input_schema={
            "type": "object",
            "properties": {
                "results": _result_set_schema("Raw crawling results from crawl_saas_images"),
                "focus": {
                    "type": "string",
                    "description": 'Analysis focus: "quality", "diversity", "marketing", or "technical"',
                    "enum": [f.value for f in AnalysisFocus],
                    "default": AnalysisFocus.QUALITY.value,
                },
            },
            "required": ["results"],
        },
    ),
    ToolSpec(
        name=COMPARE_IMAGE_SETS,
        title="Compare Image Sets",
        description="Compare image sets from multiple websites",
        input_schema={
            "type": "object",
            "properties": {
                "website_a": _result_set_schema("Crawling results from first website"),
                "website_b": _result_set_schema("Crawling results from second website"),
                "comparison_type": {
                    "type": "string",
                    "description": "Type of comparison to perform",
                    "enum": [c.value for c in ComparisonType],
                    "default": ComparisonType.QUALITY.value,
                },
            },
            "required": ["website_a", "website_b"],
        },
    ),
]

_TOOLS_BY_NAME = {tool.name: tool for tool in TOOLS}


def list_tools() -> list[ToolSpec]:
    return list(TOOLS)


def get_tool(name: str) -> Optional[ToolSpec]:
    return _TOOLS_BY_NAME.get(name)
