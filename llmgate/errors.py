"""Exceptions raised by the gateway, the tool registry and the agent layer."""

from typing import Optional


class LLMGatewayError(Exception):
    """Base class for every error raised by llmgate."""


# =============================================================================
# Gateway / provider errors
# =============================================================================

class InvalidProviderError(LLMGatewayError, ValueError):
    """Raised when a provider identifier is not in the endpoint table."""

    def __init__(self, provider: str):
        super().__init__(f"Invalid provider: {provider}")
        self.provider = provider


class MissingCredentialError(LLMGatewayError, ValueError):
    """Raised when a provider needs an API key and none was supplied."""

    def __init__(self, provider: str):
        super().__init__(f"No API key provided for {provider}")
        self.provider = provider


class InvalidRequestError(LLMGatewayError, ValueError):
    """Bad caller input, e.g. an empty message list or no model."""


class ProviderError(LLMGatewayError):
    """
    A vendor call failed or returned something unusable.

    The wrapped exception is available as ``__cause__``.
    """

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class InvalidResponseError(ProviderError):
    """The vendor payload has no extractable assistant turn."""


class ProviderUnavailableError(ProviderError):
    """The provider is not initialized or its model listing failed."""


# =============================================================================
# Tool errors
# =============================================================================

class InvalidToolError(LLMGatewayError, ValueError):
    """A tool descriptor is missing its name, description or execute callable."""


class ToolNotFoundError(LLMGatewayError, LookupError):
    def __init__(self, name: str):
        super().__init__(f"Tool not found: {name}")
        self.name = name


# =============================================================================
# Agent errors
# =============================================================================

class MissingNameError(LLMGatewayError, ValueError):
    def __init__(self):
        super().__init__("Agent name is required")


class DuplicateAgentError(LLMGatewayError, ValueError):
    def __init__(self, name: str):
        super().__init__(f"Agent with name {name} already exists")
        self.name = name


class AgentNotFoundError(LLMGatewayError, LookupError):
    def __init__(self, name: str):
        super().__init__(f"Agent not found: {name}")
        self.name = name


class StructuredOutputParseError(LLMGatewayError, ValueError):
    """Model output could not be read as JSON. Never escapes Agent.execute_task."""
