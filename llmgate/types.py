from typing import Literal, List, Dict, Any, Optional, TypedDict

# =============================================================================
# Type Definitions
# =============================================================================

# Supported LLM providers
Provider = Literal["openai", "anthropic", "deepseek", "gemini", "ollama"]

Role = Literal["system", "user", "assistant", "tool"]


class ToolCall(TypedDict):
    """
    Tool call requested by the model.

    ``arguments`` is always JSON text, ``"{}"`` when the call has no arguments.
    """
    id: str
    name: str
    arguments: str


class Message(TypedDict, total=False):
    """
    Canonical chat message.

    Roles:
    - "system": System prompt / instructions
    - "user": User message
    - "assistant": Model response (may carry tool_calls, then content is empty)
    - "tool": Tool execution result, always carries tool_call_id
    """
    role: Role
    content: Optional[str]
    tool_calls: List[ToolCall]
    tool_call_id: str
    name: str  # Tool name on tool result messages


class CanonicalResponse(TypedDict, total=False):
    """
    Provider-independent result of one chat request.
    """
    content: Optional[str]
    role: Literal["assistant"]
    provider: str
    tool_calls: List[ToolCall]
    raw: Dict[str, Any]  # Vendor payload, untouched


class Feedback(TypedDict):
    timestamp: str
    text: str
