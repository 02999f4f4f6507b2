from __future__ import annotations

from typing import Any

from edgetools.services.crawler import Crawler

from .base import ResourceContent, ResourceDescriptor, TextContent, Tool, ToolName, ToolResult


class ScrapeUrlTool(Tool):
    name = ToolName.SCRAPE_URL

    def __init__(self, *, crawler: Crawler) -> None:
        self._crawler = crawler

    def run(self, args: dict[str, Any]) -> ToolResult:
        crawl = self._crawler.crawl(args["url"])
        summary = (
            f"Scraped {crawl.root_url}: {len(crawl.links)} sublinks "
            f"({len(crawl.failed_links)} failed)"
        )
        return ToolResult(
            content=[
                TextContent(text=summary),
                ResourceContent(
                    resource=ResourceDescriptor(
                        uri=crawl.root_url,
                        text=crawl.to_json(),
                        mime_type="application/json",
                    )
                ),
            ]
        )
