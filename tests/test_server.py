"""MCP surface: tool listing and error codes, through the registered request handlers."""

import pytest
from mcp import types
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND

from saas_image_crawler import server
from saas_image_crawler.core import reports
from saas_image_crawler.core.dispatcher import ToolDispatcher
from saas_image_crawler.core.clients.crawler import CrawlerSettings

from conftest import image_dict


@pytest.fixture(autouse=True)
def _dispatcher(monkeypatch):
    monkeypatch.setattr(server, "_dispatcher", ToolDispatcher(settings=CrawlerSettings(endpoint="https://crawler.test")))


async def _list_tools() -> list[types.Tool]:
    handler = server.server.request_handlers[types.ListToolsRequest]
    result = await handler(types.ListToolsRequest())
    return result.root.tools


async def _call(name: str, arguments: dict | None) -> types.CallToolResult:
    handler = server.server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(params=types.CallToolRequestParams(name=name, arguments=arguments))
    result = await handler(request)
    return result.root


async def _call_error(name: str, arguments: dict | None) -> types.ErrorData:
    with pytest.raises(McpError) as excinfo:
        await _call(name, arguments)
    return excinfo.value.error


@pytest.mark.asyncio
async def test_list_tools():
    tools = {tool.name: tool for tool in await _list_tools()}

    assert set(tools) == {"crawl_saas_images", "analyze_crawl_results", "compare_image_sets"}
    crawl = tools["crawl_saas_images"]
    assert crawl.inputSchema["required"] == ["url"]
    assert crawl.inputSchema["properties"]["force_refresh"]["default"] is False
    assert crawl.annotations.openWorldHint is True

    analyze = tools["analyze_crawl_results"].inputSchema["properties"]["focus"]
    assert analyze["enum"] == ["quality", "diversity", "marketing", "technical"]
    assert analyze["default"] == "quality"

    compare = tools["compare_image_sets"].inputSchema
    assert compare["required"] == ["website_a", "website_b"]
    assert compare["properties"]["comparison_type"]["enum"] == [
        "quantity",
        "quality",
        "diversity",
        "marketing_effectiveness",
    ]


@pytest.mark.asyncio
async def test_call_tool_returns_single_text_block():
    arguments = {"results": {"images": [image_dict(1, alt="Feature overview")]}, "focus": "diversity"}
    result = await _call("analyze_crawl_results", arguments)
    assert result.isError is False
    assert len(result.content) == 1
    assert result.content[0].type == "text"
    assert result.content[0].text.startswith("# Image Diversity Analysis for Unknown")


@pytest.mark.asyncio
async def test_unknown_tool_is_method_not_found():
    error = await _call_error("nope", {})
    assert error.code == METHOD_NOT_FOUND
    assert error.message == "Unknown tool: nope"


@pytest.mark.asyncio
async def test_invalid_url_is_invalid_params():
    error = await _call_error("crawl_saas_images", {"url": "ftp://x.com"})
    assert error.code == INVALID_PARAMS
    assert "Must start with http:// or https://" in error.message


@pytest.mark.asyncio
async def test_missing_arguments_is_invalid_params():
    error = await _call_error("analyze_crawl_results", None)
    assert error.code == INVALID_PARAMS


@pytest.mark.asyncio
async def test_empty_images_is_invalid_params():
    error = await _call_error("analyze_crawl_results", {"results": {"images": []}})
    assert error.code == INVALID_PARAMS
    assert "results.images must contain at least one image" in error.message


@pytest.mark.asyncio
async def test_unexpected_failure_is_internal_error(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("renderer exploded")

    monkeypatch.setattr(reports, "render_comparison", boom)
    arguments = {"website_a": {"images": [image_dict(1)]}, "website_b": {"images": [image_dict(2)]}}
    error = await _call_error("compare_image_sets", arguments)
    assert error.code == INTERNAL_ERROR
    assert "renderer exploded" in error.message
