from __future__ import annotations

import logging
from typing import Any
from urllib import parse as urlparse

from edgetools.services.upstream_client import UpstreamClient, UpstreamErr, UpstreamError

from .base import ResourceContent, ResourceDescriptor, TextContent, Tool, ToolName, ToolResult

logger = logging.getLogger(__name__)


class KvLookupTool(Tool):
    name = ToolName.KV_GET

    def __init__(self, *, client: UpstreamClient, default_namespace_id: str | None = None) -> None:
        self._client = client
        self._default_namespace_id = (default_namespace_id or "").strip() or None

    def run(self, args: dict[str, Any]) -> ToolResult:
        key = args["key"]
        namespace_id = (args.get("namespaceId") or "").strip() or self._default_namespace_id
        if not namespace_id:
            raise ValueError("namespaceId is required when CLOUDFLARE_NAMESPACE_ID is not set.")

        url = self._client.account_url(
            f"storage/kv/namespaces/{_path_segment('namespaceId', namespace_id)}"
            f"/values/{_path_segment('key', key)}"
        )
        logger.info("Retrieving value from Cloudflare KV for key: %s", key)
        outcome = self._client.call("GET", url, not_found_is_distinct=True)
        if isinstance(outcome, UpstreamErr):
            if outcome.not_found:
                return ToolResult.text(f"Key '{key}' not found in Cloudflare KV namespace.")
            raise UpstreamError.from_outcome(outcome)

        value = outcome.text
        return ToolResult(
            content=[
                TextContent(
                    text=(
                        "Successfully retrieved value from Cloudflare KV.\n"
                        f"Key: {key}\n"
                        f"Value: {value}"
                    )
                ),
                ResourceContent(
                    resource=ResourceDescriptor(
                        uri=f"kv://{namespace_id}/{key}",
                        text=value,
                        mime_type="text/plain",
                    )
                ),
            ]
        )


def _path_segment(field_name: str, value: str) -> str:
    if value in {".", ".."}:
        raise ValueError(f"{field_name} must not be a relative path segment")
    return urlparse.quote(value, safe="")
