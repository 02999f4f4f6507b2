from .crawler import Crawler, CrawlError, CrawlResult
from .gateway import ToolGateway
from .resource_encoder import ResourceEncoder
from .upstream_client import (
    CloudflareCredentials,
    UpstreamClient,
    UpstreamErr,
    UpstreamError,
    UpstreamOk,
)

__all__ = [
    "CloudflareCredentials",
    "Crawler",
    "CrawlError",
    "CrawlResult",
    "ResourceEncoder",
    "ToolGateway",
    "UpstreamClient",
    "UpstreamErr",
    "UpstreamError",
    "UpstreamOk",
]
