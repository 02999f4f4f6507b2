from __future__ import annotations

import logging
from typing import Any

from edgetools.services.upstream_client import UpstreamError
from edgetools.tools.base import ToolResult, ToolValidationError
from edgetools.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class ToolGateway:
    """Single entry point for tool calls.

    ``invoke`` never raises: unknown tools, invalid arguments and handler
    failures all come back as an ``Error: ...`` text result the caller can read.
    Upstream calls are attempted once; retry policy belongs to the caller.
    """

    def __init__(self, tool_registry: ToolRegistry) -> None:
        self._tool_registry = tool_registry

    def invoke(self, tool_name: str, raw_input: Any) -> ToolResult:
        try:
            tool_def = self._tool_registry.get_definition(tool_name)
        except LookupError as exc:
            logger.warning("Rejected call to unknown tool %r", tool_name)
            return ToolResult.error(str(exc))

        try:
            validated_args = tool_def.validate_args(raw_input)
        except ToolValidationError as exc:
            logger.info("Invalid arguments for %s: %s", tool_def.name.value, exc)
            return ToolResult.error(f"{exc.field} {exc.reason}")

        logger.info("Invoking %s", tool_def.name.value)
        try:
            result = tool_def.tool.run(validated_args)
        except Exception as exc:
            message = best_effort_message(exc)
            logger.warning("Tool %s failed: %s", tool_def.name.value, message)
            logger.debug("Tool %s failure detail", tool_def.name.value, exc_info=True)
            return ToolResult.error(message)

        if not result.content:
            return ToolResult.error(f"{tool_def.name.value} returned no content")
        return result


def best_effort_message(exc: BaseException) -> str:
    if isinstance(exc, UpstreamError) and exc.provider_message:
        return exc.provider_message
    return str(exc) or exc.__class__.__name__
