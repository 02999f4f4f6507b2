from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .base import Tool, ToolName, ToolValidationError

_TYPE_CHECKS: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "integer": (int,),
    "boolean": (bool,),
    "object": (dict,),
    "array": (list,),
}


@dataclass(frozen=True)
class FieldSpec:
    type: str
    optional: bool = False
    default: Any = None
    description: str = ""

    def accepts(self, value: Any) -> bool:
        if self.type == "integer" and isinstance(value, bool):
            return False
        return isinstance(value, _TYPE_CHECKS[self.type])


@dataclass(frozen=True)
class ToolDefinition:
    name: ToolName
    label: str
    description: str
    tool: Tool
    fields: Mapping[str, FieldSpec]

    def validate_args(self, args: Any) -> dict[str, Any]:
        if not isinstance(args, dict):
            raise ToolValidationError("arguments", "must be an object")

        clean: dict[str, Any] = {}
        for key, spec in self.fields.items():
            value = args.get(key)
            if value is None:
                if not spec.optional:
                    raise ToolValidationError(key, "is required")
                clean[key] = spec.default
                continue
            if not spec.accepts(value):
                raise ToolValidationError(key, f"must be a {spec.type}")
            clean[key] = value
        return clean

    def input_schema(self) -> dict[str, object]:
        properties: dict[str, object] = {}
        for key, spec in self.fields.items():
            prop: dict[str, object] = {"type": spec.type}
            if spec.description:
                prop["description"] = spec.description
            if spec.optional and spec.default is not None:
                prop["default"] = spec.default
            properties[key] = prop
        return {
            "type": "object",
            "required": [key for key, spec in self.fields.items() if not spec.optional],
            "properties": properties,
        }


class ToolRegistry:
    def __init__(self) -> None:
        self._tools: dict[ToolName, ToolDefinition] = {}

    def register(
        self,
        *,
        tool: Tool,
        label: str,
        description: str,
        fields: Mapping[str, FieldSpec],
    ) -> None:
        name = ToolName(tool.name)
        if name in self._tools:
            raise ValueError(f"Tool '{name.value}' is already registered.")
        for key, spec in fields.items():
            if spec.type not in _TYPE_CHECKS:
                raise ValueError(
                    f"Tool '{name.value}' field '{key}' has unsupported type '{spec.type}'."
                )
            if not spec.optional and spec.default is not None:
                raise ValueError(
                    f"Tool '{name.value}' field '{key}' is required and cannot declare a default."
                )
            if spec.optional and spec.default is not None and not spec.accepts(spec.default):
                raise ValueError(
                    f"Tool '{name.value}' field '{key}' default must be a {spec.type}."
                )
        self._tools[name] = ToolDefinition(
            name=name,
            label=label,
            description=description,
            tool=tool,
            fields=dict(fields),
        )

    def get_definition(self, name: str) -> ToolDefinition:
        try:
            return self._tools[ToolName(name)]
        except (KeyError, ValueError) as exc:
            raise LookupError(f"tool '{name}' is not registered") from exc

    def list_tools(self) -> list[str]:
        return sorted(name.value for name in self._tools)

    def describe(self) -> list[dict[str, object]]:
        out: list[dict[str, object]] = []
        for name in self.list_tools():
            definition = self._tools[ToolName(name)]
            out.append(
                {
                    "name": definition.name.value,
                    "label": definition.label,
                    "description": definition.description,
                    "input_schema": definition.input_schema(),
                }
            )
        return out
