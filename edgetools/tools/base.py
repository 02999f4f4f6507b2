from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class ToolName(str, Enum):
    FETCH_AUDIO = "fetchAudioAndSave"
    SUMMARIZE_TEXT = "summarizeText"
    SCRAPE_URL = "scrapeUrlAndSublinks"
    UPLOAD_AUDIO = "uploadAudioToR2"
    KV_GET = "getFromCloudflareKV"


class ToolValidationError(ValueError):
    def __init__(self, field_name: str, reason: str) -> None:
        super().__init__(f"{field_name} {reason}")
        self.field = field_name
        self.reason = reason


@dataclass(frozen=True)
class ResourceDescriptor:
    uri: str
    blob: str | None = None
    text: str | None = None
    mime_type: str | None = None
    extension: str | None = None

    def to_dict(self) -> dict[str, str]:
        out = {"uri": self.uri}
        if self.blob is not None:
            out["blob"] = self.blob
        if self.text is not None:
            out["text"] = self.text
        if self.mime_type is not None:
            out["mimeType"] = self.mime_type
        return out


@dataclass(frozen=True)
class TextContent:
    text: str

    def to_dict(self) -> dict[str, object]:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True)
class ResourceContent:
    resource: ResourceDescriptor

    def to_dict(self) -> dict[str, object]:
        return {"type": "resource", "resource": self.resource.to_dict()}


ContentItem = Union[TextContent, ResourceContent]


@dataclass(frozen=True)
class ToolResult:
    content: list[ContentItem] = field(default_factory=list)

    @classmethod
    def text(cls, text: str) -> ToolResult:
        return cls(content=[TextContent(text=text)])

    @classmethod
    def error(cls, message: str) -> ToolResult:
        return cls.text(f"Error: {message}")

    def to_dict(self) -> dict[str, object]:
        return {"content": [item.to_dict() for item in self.content]}


class Tool(ABC):
    name: ToolName

    @abstractmethod
    def run(self, args: dict[str, Any]) -> ToolResult:
        raise NotImplementedError
