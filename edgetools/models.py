from typing import Any

from pydantic import BaseModel, Field


class ToolInvokeRequest(BaseModel):
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolInvokeResponse(BaseModel):
    content: list[dict[str, Any]] = Field(default_factory=list)


class ToolDescription(BaseModel):
    name: str
    label: str
    description: str
    input_schema: dict[str, Any] = Field(default_factory=dict)
