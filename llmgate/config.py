"""
Provider endpoint table and environment settings.

Values are read from the process environment after loading a ``.env`` file.
"""
import copy
import os
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

import dotenv

# Load environment variables
dotenv.load_dotenv()

# Transport timeout applied to every LLM request
LLM_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True)
class ProviderConfig:
    """
    Static description of one provider endpoint.

    ``headers`` values may contain an ``{apiKey}`` placeholder that is
    substituted by :func:`get_provider_endpoint`.
    """
    name: str
    endpoint: str
    headers: Dict[str, str]
    models_endpoint: Optional[str] = None
    models: Optional[List[str]] = None
    default_model: Optional[str] = None
    requires_key: bool = True


PROVIDERS: Dict[str, ProviderConfig] = {
    "openai": ProviderConfig(
        name="OpenAI",
        endpoint="https://api.openai.com/v1/chat/completions",
        models_endpoint="https://api.openai.com/v1/models",
        headers={
            "Content-Type": "application/json",
            "Authorization": "Bearer {apiKey}",
        },
    ),
    "anthropic": ProviderConfig(
        name="Anthropic",
        endpoint="https://api.anthropic.com/v1/messages",
        headers={
            "Content-Type": "application/json",
            "x-api-key": "{apiKey}",
            "anthropic-version": "2023-06-01",
        },
        models=[
            "claude-3-5-sonnet-latest",
            "claude-3-5-haiku-latest",
            "claude-3-opus-latest",
        ],
        default_model="claude-3-5-sonnet-latest",
    ),
    "deepseek": ProviderConfig(
        name="Deepseek",
        endpoint="https://api.deepseek.com/v1/chat/completions",
        headers={
            "Content-Type": "application/json",
            "Authorization": "Bearer {apiKey}",
        },
        models=["deepseek-chat", "deepseek-reasoner"],
        default_model="deepseek-chat",
    ),
    "gemini": ProviderConfig(
        name="Gemini",
        endpoint="https://generativelanguage.googleapis.com/v1beta/models",
        headers={
            "Content-Type": "application/json",
            "x-goog-api-key": "{apiKey}",
        },
        models=["gemini-2.0-pro", "gemini-2.0-flash", "gemini-2.0-flash-lite"],
        default_model="gemini-2.0-flash",
    ),
    "ollama": ProviderConfig(
        name="Ollama",
        endpoint="http://localhost:11434/api/chat",
        models_endpoint="http://localhost:11434/api/tags",
        headers={"Content-Type": "application/json"},
        default_model="llama2",
        requires_key=False,
    ),
}

# Environment variables holding each provider's API key, in lookup order
API_KEY_ENV = {
    "openai": ["OPENAI_API_KEY"],
    "anthropic": ["ANTHROPIC_API_KEY"],
    "deepseek": ["DEEPSEEK_API_KEY"],
    "gemini": ["GEMINI_API_KEY", "GOOGLE_API_KEY"],
}


def get_provider_config(provider_name: Optional[str]) -> Optional[ProviderConfig]:
    """Return the table entry for ``provider_name`` (case-insensitive) or None."""
    if not provider_name:
        return None
    return PROVIDERS.get(provider_name.lower())


def get_provider_endpoint(provider_name: Optional[str], api_key: str = "") -> Optional[ProviderConfig]:
    """
    Get a provider configuration with the API key filled into its headers.

    The table entry itself is never modified; a new config is returned.

    Args:
        provider_name (str): Provider identifier, e.g. 'openai'.
        api_key (str): Credential substituted for ``{apiKey}``.

    Returns:
        Optional[ProviderConfig]: The resolved config, or None for unknown providers.
    """
    config = get_provider_config(provider_name)
    if config is None:
        return None

    headers = {
        key: value.replace("{apiKey}", api_key or "")
        for key, value in config.headers.items()
    }
    return replace(config, headers=headers, models=copy.copy(config.models))


def api_key_from_env(provider_name: str) -> Optional[str]:
    """Look up a provider's API key in the environment."""
    for var in API_KEY_ENV.get(provider_name.lower(), []):
        value = os.getenv(var)
        if value:
            return value
    return None


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Runtime settings read from the environment."""
    default_provider: str = field(default_factory=lambda: os.getenv("DEFAULT_PROVIDER", "openai"))
    default_model: Optional[str] = field(default_factory=lambda: os.getenv("DEFAULT_MODEL") or None)
    enable_agents: bool = field(default_factory=lambda: _env_flag("ENABLE_AGENTS"))
    default_agent: str = field(default_factory=lambda: os.getenv("DEFAULT_AGENT") or "default")
    log_level: str = field(default_factory=lambda: os.getenv("LLMGATE_LOG_LEVEL", "INFO"))


settings = Settings()
