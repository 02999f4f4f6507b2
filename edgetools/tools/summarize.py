from __future__ import annotations

from typing import Any

from edgetools.services.upstream_client import UpstreamClient, expect_ok, result_field

from .base import Tool, ToolName, ToolResult


class SummarizeTextTool(Tool):
    name = ToolName.SUMMARIZE_TEXT

    def __init__(
        self,
        *,
        client: UpstreamClient,
        model: str = "@cf/facebook/bart-large-cnn",
        max_tokens: int = 100,
    ) -> None:
        self._client = client
        self._model = model
        self._max_tokens = max(1, int(max_tokens))

    def run(self, args: dict[str, Any]) -> ToolResult:
        outcome = expect_ok(
            self._client.call(
                "POST",
                self._client.account_url(f"ai/run/{self._model}"),
                json={"input_text": args["text"], "max_tokens": self._max_tokens},
            )
        )
        summary = result_field(outcome.payload, "summary")
        if not summary:
            raise RuntimeError("Summary data not found in the response.")
        return ToolResult.text(summary)
