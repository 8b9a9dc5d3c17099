"""SaaS Image Crawler MCP Server.

Trigger remote image crawls of SaaS websites and score the results:
alt-text quality, diversity, marketing language, and technical delivery.
"""

__version__ = "1.0.0"
