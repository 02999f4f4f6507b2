from __future__ import annotations

import uuid
from typing import Any

from edgetools.services.resource_encoder import ResourceEncoder
from edgetools.services.upstream_client import UpstreamClient, expect_ok, result_field

from .base import ResourceContent, TextContent, Tool, ToolName, ToolResult


class FetchAudioTool(Tool):
    name = ToolName.FETCH_AUDIO

    def __init__(
        self,
        *,
        client: UpstreamClient,
        encoder: ResourceEncoder,
        model: str = "@cf/myshell-ai/melotts",
    ) -> None:
        self._client = client
        self._encoder = encoder
        self._model = model

    def run(self, args: dict[str, Any]) -> ToolResult:
        payload = {"prompt": args.get("text") or "", "lang": args.get("lang") or "en"}
        outcome = expect_ok(
            self._client.call(
                "POST",
                self._client.account_url(f"ai/run/{self._model}"),
                json=payload,
            )
        )

        audio = result_field(outcome.payload, "audio")
        if not audio:
            raise RuntimeError("Audio data not found in the response.")

        audio_id = uuid.uuid4()
        return ToolResult(
            content=[
                TextContent(text=f"Generated audio ID: {audio_id}"),
                ResourceContent(resource=self._encoder.encode(audio)),
            ]
        )

