from __future__ import annotations

import logging
import sys

from fastapi import FastAPI

from edgetools.config import Settings, settings
from edgetools.models import ToolDescription, ToolInvokeRequest, ToolInvokeResponse
from edgetools.services import (
    CloudflareCredentials,
    Crawler,
    ResourceEncoder,
    ToolGateway,
    UpstreamClient,
)
from edgetools.tools import (
    FetchAudioTool,
    FieldSpec,
    KvLookupTool,
    ScrapeUrlTool,
    SummarizeTextTool,
    ToolRegistry,
    UploadAudioTool,
)

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    stream=sys.stderr,
)

app = FastAPI(title="edgetools API", version="1.0.0")


def build_tool_registry(cfg: Settings) -> ToolRegistry:
    client = UpstreamClient(
        credentials=CloudflareCredentials.from_values(
            account_id=cfg.cloudflare_account_id,
            email=cfg.cloudflare_email,
            api_key=cfg.cloudflare_api_key,
        ),
        api_base_url=cfg.cloudflare_api_base_url,
        timeout_seconds=cfg.upstream_timeout_seconds,
    )
    encoder = ResourceEncoder(fallback_mime_type=cfg.default_audio_mime_type)

    registry = ToolRegistry()
    registry.register(
        tool=FetchAudioTool(client=client, encoder=encoder, model=cfg.tts_model),
        label="Text to speech",
        description="Convert text to speech and return the audio as a base64 resource.",
        fields={
            "text": FieldSpec(
                type="string", optional=True, default="", description="Text to speak."
            ),
            "lang": FieldSpec(
                type="string", optional=True, default="en", description="Language code."
            ),
        },
    )
    registry.register(
        tool=SummarizeTextTool(
            client=client,
            model=cfg.summarize_model,
            max_tokens=cfg.summarize_max_tokens,
        ),
        label="Summarize text",
        description="Summarize the provided text.",
        fields={
            "text": FieldSpec(type="string", description="Text to summarize."),
        },
    )
    registry.register(
        tool=ScrapeUrlTool(crawler=Crawler(timeout_seconds=cfg.scrape_timeout_seconds)),
        label="Scrape URL",
        description="Fetch a page and up to 5 of its links, returning their visible text.",
        fields={
            "url": FieldSpec(type="string", description="Absolute http(s) URL to scrape."),
        },
    )
    registry.register(
        tool=UploadAudioTool(
            client=client,
            encoder=encoder,
            bucket_name=cfg.r2_bucket_name,
            public_base_url=cfg.r2_public_url,
        ),
        label="Upload audio to R2",
        description="Upload a base64 audio file to R2 storage and return its URL.",
        fields={
            "fileData": FieldSpec(type="string", description="Base64 encoded file data."),
            "fileName": FieldSpec(
                type="string", optional=True, description="Object name in the bucket."
            ),
            "contentType": FieldSpec(
                type="string", optional=True, description="Mime type; detected when omitted."
            ),
        },
    )
    registry.register(
        tool=KvLookupTool(client=client, default_namespace_id=cfg.cloudflare_namespace_id),
        label="Cloudflare KV lookup",
        description="Read a value from a Cloudflare KV namespace.",
        fields={
            "key": FieldSpec(type="string", description="Key to read."),
            "namespaceId": FieldSpec(
                type="string", optional=True, description="Namespace; defaults to the configured one."
            ),
        },
    )
    return registry


tool_registry = build_tool_registry(settings)
gateway = ToolGateway(tool_registry=tool_registry)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/v1/tools", response_model=list[ToolDescription])
def list_tools() -> list[ToolDescription]:
    return [ToolDescription(**row) for row in tool_registry.describe()]


@app.post("/v1/tools/{tool_name}/invoke", response_model=ToolInvokeResponse)
def invoke_tool(tool_name: str, payload: ToolInvokeRequest) -> ToolInvokeResponse:
    result = gateway.invoke(tool_name, payload.arguments)
    return ToolInvokeResponse(**result.to_dict())
