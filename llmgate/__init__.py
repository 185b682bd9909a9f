from .types import Message, ToolCall, CanonicalResponse, Provider
from .errors import (
    LLMGatewayError,
    InvalidProviderError,
    MissingCredentialError,
    InvalidRequestError,
    ProviderError,
    InvalidResponseError,
    ProviderUnavailableError,
    InvalidToolError,
    ToolNotFoundError,
    DuplicateAgentError,
    AgentNotFoundError,
    MissingNameError,
    StructuredOutputParseError,
)
from .service import GatewayService
from .registry import ServiceRegistry, default_registry
from .tools import ToolDescriptor, ToolRegistry, register_tools
from .agents import Agent, AgentManager, create_agent_manager, initialize_default_agent
from .log import setup_logging
from .rich_llm_printer import RichPrinter

__all__ = [
    "Message",
    "ToolCall",
    "CanonicalResponse",
    "Provider",
    "LLMGatewayError",
    "InvalidProviderError",
    "MissingCredentialError",
    "InvalidRequestError",
    "ProviderError",
    "InvalidResponseError",
    "ProviderUnavailableError",
    "InvalidToolError",
    "ToolNotFoundError",
    "DuplicateAgentError",
    "AgentNotFoundError",
    "MissingNameError",
    "StructuredOutputParseError",
    "GatewayService",
    "ServiceRegistry",
    "default_registry",
    "ToolDescriptor",
    "ToolRegistry",
    "register_tools",
    "Agent",
    "AgentManager",
    "create_agent_manager",
    "initialize_default_agent",
    "setup_logging",
    "RichPrinter",
]
