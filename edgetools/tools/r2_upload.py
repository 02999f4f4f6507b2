from __future__ import annotations

import logging
import uuid
from typing import Any
from urllib import parse as urlparse

from edgetools.services.resource_encoder import ResourceEncoder, decode_payload
from edgetools.services.upstream_client import UpstreamClient, expect_ok

from .base import ResourceContent, TextContent, Tool, ToolName, ToolResult

logger = logging.getLogger(__name__)


class UploadAudioTool(Tool):
    name = ToolName.UPLOAD_AUDIO

    def __init__(
        self,
        *,
        client: UpstreamClient,
        encoder: ResourceEncoder,
        bucket_name: str = "uploads",
        public_base_url: str | None = None,
    ) -> None:
        self._client = client
        self._encoder = encoder
        self._bucket_name = bucket_name
        self._public_base_url = (public_base_url or "").strip().rstrip("/") or None

    def run(self, args: dict[str, Any]) -> ToolResult:
        file_data = args["fileData"]
        content_type = self._encoder.resolve_mime_type(file_data, args.get("contentType"))
        descriptor = self._encoder.encode(file_data, content_type)
        file_name = (args.get("fileName") or "").strip() or (
            f"audio-{uuid.uuid4()}.{descriptor.extension}"
        )
        object_path = _object_path(file_name)
        body = decode_payload(file_data)

        upload_url = self._client.account_url(
            f"r2/buckets/{self._bucket_name}/objects/{object_path}"
        )
        logger.info("Uploading %s file to R2: %s (%s bytes)", content_type, file_name, len(body))
        expect_ok(
            self._client.call(
                "PUT",
                upload_url,
                data=body,
                headers={
                    "Content-Type": content_type,
                    "Content-Length": str(len(body)),
                },
                ok_statuses=(200, 201),
            )
        )

        file_url = (
            f"{self._public_base_url}/{object_path}" if self._public_base_url else upload_url
        )
        return ToolResult(
            content=[
                TextContent(
                    text=(
                        "File successfully uploaded to R2 storage.\n"
                        f"File: {file_name}\n"
                        f"URL: {file_url}\n"
                        f"Type: {content_type}"
                    )
                ),
                ResourceContent(
                    resource=self._encoder.encode(file_data, content_type, location=file_url)
                ),
            ]
        )


def _object_path(file_name: str) -> str:
    if "\\" in file_name:
        raise ValueError("fileName must not contain backslashes")
    segments = file_name.split("/")
    for segment in segments:
        if segment in {"", ".", ".."}:
            raise ValueError(f"fileName has an invalid path segment: '{file_name}'")
    return "/".join(urlparse.quote(segment, safe="") for segment in segments)
