"""Error taxonomy for tool calls.

Codes follow JSON-RPC 2.0 so the server layer can forward them unchanged.
"""

from __future__ import annotations

METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class ToolCallError(Exception):
    """Base class for every failure surfaced to the calling client."""

    code = INTERNAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnknownToolError(ToolCallError):
    code = METHOD_NOT_FOUND


class InvalidParamsError(ToolCallError):
    code = INVALID_PARAMS


class EmptyImageSetError(InvalidParamsError):
    """Raised by scoring aggregates, which all divide by the image count."""

    def __init__(self, message: str = "At least one image is required for analysis"):
        super().__init__(message)


class InternalToolError(ToolCallError):
    code = INTERNAL_ERROR


class CrawlGatewayError(InternalToolError):
    """Transport failure, timeout, or malformed response from the crawl endpoint."""
