from typing import Dict, Type

from .base import BaseLLMProvider, LLMRequest
from .openai import OpenAIProvider
from .anthropic import AnthropicProvider
from .deepseek import DeepseekProvider
from .gemini import GeminiProvider
from .ollama import OllamaProvider

# Provider id -> adapter class. Adding a vendor only needs a new entry here
# and in config.PROVIDERS.
ADAPTERS: Dict[str, Type[BaseLLMProvider]] = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
    "deepseek": DeepseekProvider,
    "gemini": GeminiProvider,
    "ollama": OllamaProvider,
}

__all__ = [
    "ADAPTERS",
    "BaseLLMProvider",
    "LLMRequest",
    "OpenAIProvider",
    "AnthropicProvider",
    "DeepseekProvider",
    "GeminiProvider",
    "OllamaProvider",
]
