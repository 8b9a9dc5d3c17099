"""Core business logic: scoring, reports, tool dispatch, and the crawl client.

This module is framework-agnostic. It has no dependency on MCP or any
transport; the stdio server in ``saas_image_crawler.server`` wraps it.
"""
