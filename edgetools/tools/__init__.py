from .base import (
    ResourceContent,
    ResourceDescriptor,
    TextContent,
    Tool,
    ToolName,
    ToolResult,
    ToolValidationError,
)
from .registry import FieldSpec, ToolDefinition, ToolRegistry

__all__ = [
    "FieldSpec",
    "ResourceContent",
    "ResourceDescriptor",
    "TextContent",
    "Tool",
    "ToolDefinition",
    "ToolName",
    "ToolRegistry",
    "ToolResult",
    "ToolValidationError",
    "FetchAudioTool",
    "KvLookupTool",
    "ScrapeUrlTool",
    "SummarizeTextTool",
    "UploadAudioTool",
]

_HANDLER_MODULES = {
    "FetchAudioTool": "text_to_speech",
    "SummarizeTextTool": "summarize",
    "ScrapeUrlTool": "scrape",
    "UploadAudioTool": "r2_upload",
    "KvLookupTool": "kv_lookup",
}


def __getattr__(name: str):
    if name in _HANDLER_MODULES:
        from importlib import import_module

        module = import_module(f".{_HANDLER_MODULES[name]}", __name__)
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
