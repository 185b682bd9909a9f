"""
Tool descriptors and the per-service tool registry.

A tool is a named callable the model may ask to run. Each gateway service
owns one registry; the first registration of a name wins.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

from ..errors import InvalidToolError, ToolNotFoundError

logger = logging.getLogger(__name__)


def _empty_schema() -> Dict[str, Any]:
    return {"type": "object", "properties": {}}


@dataclass
class ToolDescriptor:
    """
    A callable tool exposed to the model.

    Attributes:
        name: Unique name within a registry.
        description: What the tool does, shown to the model.
        parameters: JSON Schema for the arguments object.
        execute: ``execute(args, context)``, sync or async.
        progress_text: Status shown through the progress callback while it runs.
    """
    name: str
    description: str
    execute: Callable[..., Any]
    parameters: Dict[str, Any] = field(default_factory=_empty_schema)
    progress_text: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ToolDescriptor":
        return cls(
            name=data.get("name"),
            description=data.get("description"),
            execute=data.get("execute"),
            parameters=data.get("parameters") or _empty_schema(),
            progress_text=data.get("progress_text") or data.get("progressText"),
        )


ToolLike = Union[ToolDescriptor, Mapping[str, Any]]


def as_tool(tool: ToolLike) -> ToolDescriptor:
    """Coerce a mapping into a ToolDescriptor; descriptors pass through."""
    if isinstance(tool, ToolDescriptor):
        return tool
    if isinstance(tool, Mapping):
        return ToolDescriptor.from_dict(tool)
    raise InvalidToolError(f"Tool must be a ToolDescriptor or mapping, got {type(tool).__name__}")


class ToolRegistry:
    """Mapping of tool name to descriptor."""

    def __init__(self):
        self._tools: Dict[str, ToolDescriptor] = {}

    def register(self, tool: ToolLike) -> ToolDescriptor:
        """
        Register a tool.

        A name that is already registered is ignored and the existing
        descriptor is returned.

        Raises:
            InvalidToolError: If name or description is missing, or execute is not callable.
        """
        descriptor = as_tool(tool)
        if not descriptor.name or not descriptor.description:
            raise InvalidToolError("Tool must have a name and a description")
        if not callable(descriptor.execute):
            raise InvalidToolError(f"Tool {descriptor.name} must have an execute callable")

        existing = self._tools.get(descriptor.name)
        if existing is not None:
            logger.debug("Tool %s already registered, ignoring", descriptor.name)
            return existing

        self._tools[descriptor.name] = descriptor
        logger.debug("Registered tool %s", descriptor.name)
        return descriptor

    def get(self, name: str) -> ToolDescriptor:
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def list(self) -> List[ToolDescriptor]:
        return list(self._tools.values())

    def names(self) -> List[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self.list())
