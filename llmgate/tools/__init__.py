"""
Tool registry and the built-in tools.

``register_tools`` installs the built-in tools on a gateway service at
start-up.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from .registry import ToolDescriptor, ToolLike, ToolRegistry, as_tool
from .math_operations import math_operations_tool
from .duckduckgo import duckduckgo_search_tool
from .agent_executor import agent_executor_tool
from ..errors import LLMGatewayError

logger = logging.getLogger(__name__)


def default_tools() -> List[ToolDescriptor]:
    return [math_operations_tool, duckduckgo_search_tool, agent_executor_tool]


def validate_tool(tool: Any) -> bool:
    """Check that ``tool`` has a name, description, parameters and an execute callable."""
    try:
        descriptor = as_tool(tool)
    except LLMGatewayError:
        logger.debug("Tool validation failed: not a tool: %r", tool)
        return False

    for prop in ("name", "description", "parameters"):
        if not getattr(descriptor, prop):
            logger.debug("Tool validation failed: missing %s", prop)
            return False
    if not callable(descriptor.execute):
        logger.debug("Tool validation failed: %s has no execute function", descriptor.name)
        return False
    return True


def register_tools(service, tools: Optional[Iterable[ToolLike]] = None) -> Dict[str, Any]:
    """
    Register tools on a gateway service.

    Invalid tools are skipped; a failed registration is logged and the
    remaining tools are still registered.

    Args:
        service: GatewayService (anything with ``register_tool``).
        tools (Iterable, optional): Tools to install. Defaults to the built-in tools.

    Returns:
        Dict[str, Any]: ``{"success": bool, "tool_count": int}`` counting valid tools.
    """
    candidates = list(default_tools() if tools is None else tools)
    valid = [tool for tool in candidates if validate_tool(tool)]

    for tool in valid:
        try:
            service.register_tool(tool)
        except LLMGatewayError as exc:
            logger.error("Failed to register tool %s: %s", as_tool(tool).name, exc)

    return {"success": bool(valid), "tool_count": len(valid)}


__all__ = [
    "ToolDescriptor",
    "ToolRegistry",
    "as_tool",
    "default_tools",
    "register_tools",
    "validate_tool",
    "math_operations_tool",
    "duckduckgo_search_tool",
    "agent_executor_tool",
]
