import json
import uuid
from typing import Any, Dict, List, Literal, Optional

from .types import Message, ToolCall

# =============================================================================
# Message Helpers
# =============================================================================

def create_message(
    role: Literal["system", "user", "assistant"],
    content: str,
) -> Message:
    """
    Create a standardized Message object.

    Args:
        role (str): The role of the message sender ('system', 'user', 'assistant').
        content (str): The text of the message.

    Returns:
        Message: A dictionary matching the Message type definition.
    """
    return {"role": role, "content": content}


# =============================================================================
# Tool Calling Helpers
# =============================================================================

def new_tool_call_id() -> str:
    """
    Synthesize a tool call id for vendors that do not return one.

    Ids are random (uuid4) so rapid or concurrent calls cannot collide.
    """
    return f"call_{uuid.uuid4().hex}"


def dump_arguments(arguments: Any) -> str:
    """
    Normalize tool call arguments to JSON text.

    Vendors return either an object or an already-encoded string. Missing or
    blank arguments become ``"{}"`` so the result always parses.
    """
    if arguments is None:
        return "{}"
    if isinstance(arguments, str):
        return arguments if arguments.strip() else "{}"
    return json.dumps(arguments)


def load_arguments(arguments: Optional[str]) -> Dict[str, Any]:
    """
    Decode JSON-text tool arguments into a dict for vendors that want objects.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON.
    """
    if not arguments or not arguments.strip():
        return {}
    value = json.loads(arguments)
    return value if isinstance(value, dict) else {"value": value}


def create_tool_call(name: str, arguments: Any = None, id: Optional[str] = None) -> ToolCall:
    """
    Create a canonical ToolCall.

    Args:
        name (str): Name of the tool being called.
        arguments (Any): Object or JSON text; normalized to JSON text.
        id (str, optional): Vendor id. A unique id is synthesized when absent.

    Returns:
        ToolCall: The tool call dictionary.
    """
    return {
        "id": id or new_tool_call_id(),
        "name": name,
        "arguments": dump_arguments(arguments),
    }


def create_tool_result(tool_call_id: str, content: str, name: Optional[str] = None) -> Message:
    """
    Create a tool result message to send back to the LLM.

    Args:
        tool_call_id (str): The ID of the tool call this result corresponds to.
        content (str): The stringified result of the tool execution.
        name (str, optional): Name of the tool that produced the result.

    Returns:
        Message: A message dictionary with role='tool'.
    """
    message: Message = {
        "role": "tool",
        "tool_call_id": tool_call_id,
        "content": content,
    }
    if name:
        message["name"] = name
    return message


def create_assistant_message_with_tool_calls(
    tool_calls: List[ToolCall],
    content: Optional[str] = None,
) -> Message:
    """
    Create an assistant message that carries tool calls.

    Args:
        tool_calls (List[ToolCall]): Tool calls requested by the model.
        content (str, optional): Accompanying text, normally empty.

    Returns:
        Message: A message dictionary with role='assistant'.
    """
    return {
        "role": "assistant",
        "content": content,
        "tool_calls": tool_calls,
    }


def stringify_result(result: Any) -> str:
    """Render a tool's return value as message content."""
    if isinstance(result, str):
        return result
    return json.dumps(result, default=str)
