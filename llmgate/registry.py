"""
Service registry: resolves provider ids to initialized gateway services.
"""
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

import httpx

from .config import api_key_from_env, get_provider_config, settings
from .errors import InvalidProviderError, ProviderUnavailableError
from .providers import ADAPTERS
from .service import GatewayService
from .tools import ToolLike, register_tools
from .transport import create_llm_client
from .types import CanonicalResponse, Message

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """
    Table of initialized gateway services keyed by provider id.

    Services are created and initialized on first use and cached afterwards.
    The cache has no lock; two concurrent first initializations of one
    provider may both build a service, and the last one is kept.
    """

    def __init__(
        self,
        client_factory: Callable[[], httpx.AsyncClient] = create_llm_client,
        tools: Optional[Iterable[ToolLike]] = None,
    ):
        self.client_factory = client_factory
        self.tools = list(tools) if tools is not None else None
        self.services: Dict[str, GatewayService] = {}

    @staticmethod
    def providers() -> List[str]:
        return list(ADAPTERS)

    @staticmethod
    def _normalize(provider: Optional[str]) -> str:
        normalized = (provider or "").lower()
        if normalized not in ADAPTERS or get_provider_config(normalized) is None:
            raise InvalidProviderError(provider or "")
        return normalized

    def get_service(self, provider: str) -> GatewayService:
        """
        Return the initialized service for ``provider``.

        Raises:
            InvalidProviderError: Unknown provider.
            ProviderUnavailableError: Provider not initialized yet.
        """
        normalized = self._normalize(provider)
        service = self.services.get(normalized)
        if service is None:
            raise ProviderUnavailableError(f"{provider} service is not initialized", normalized)
        return service

    def initialize_service(self, provider: str, credential: Optional[str] = None) -> GatewayService:
        """
        Resolve and initialize the service for ``provider``.

        The credential falls back to the provider's environment variable.
        Built-in tools are registered on a newly created service. A cached
        service is returned unchanged.

        Raises:
            InvalidProviderError: Unknown provider; the cache is not touched.
            MissingCredentialError: A key is required and none was found.
        """
        normalized = self._normalize(provider)
        cached = self.services.get(normalized)
        if cached is not None:
            return cached

        try:
            service = GatewayService(normalized, ADAPTERS[normalized], self.client_factory)
            service.initialize(credential or api_key_from_env(normalized))
            result = register_tools(service, self.tools)
        except Exception as exc:
            logger.error("Failed to initialize %s service: %s", provider, exc)
            raise

        logger.debug("Registered %d tools for %s service", result["tool_count"], normalized)
        logger.debug("Initialized %s service", normalized)
        self.services[normalized] = service
        return service

    async def send_message(
        self,
        messages: Sequence[Message],
        options: Optional[Dict[str, Any]] = None,
        on_progress=None,
    ) -> CanonicalResponse:
        """Send through the provider named in ``options["provider"]`` (or the default)."""
        options = dict(options or {})
        provider = options.pop("provider", None) or settings.default_provider
        service = self.initialize_service(provider)
        return await service.send_message(messages, options, on_progress)


_default_registry: Optional[ServiceRegistry] = None


def default_registry() -> ServiceRegistry:
    """Process-wide registry for applications that do not build their own."""
    global _default_registry
    if _default_registry is None:
        _default_registry = ServiceRegistry()
    return _default_registry
