from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Sequence

import httpx

from ..config import ProviderConfig
from ..errors import (
    InvalidRequestError,
    InvalidResponseError,
    ProviderUnavailableError,
)
from ..tools.registry import ToolDescriptor, as_tool
from ..types import CanonicalResponse, Message, ToolCall


@dataclass
class LLMRequest:
    """
    A vendor HTTP request produced by ``format_request``.
    """
    url: str
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)


class BaseLLMProvider(ABC):
    """
    Abstract base class for provider adapters.

    An adapter translates canonical messages into one vendor's HTTP request and
    the vendor's JSON response back into a CanonicalResponse.
    """

    # Provider identifier reported in every CanonicalResponse
    provider_name: str = ""

    def __init__(self, config: ProviderConfig, http: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.http = http

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    @abstractmethod
    def format_request(self, messages: Sequence[Message], options: Dict[str, Any]) -> LLMRequest:
        """
        Build the vendor request for a chat turn.

        Args:
            messages (Sequence[Message]): Canonical conversation.
            options (Dict[str, Any]): ``model``, ``temperature``, ``max_tokens``, ``tools``.

        Returns:
            LLMRequest: URL, JSON body and headers.

        Raises:
            InvalidRequestError: If messages is empty or no model can be chosen.
        """

    @abstractmethod
    def parse_response(self, payload: Dict[str, Any]) -> CanonicalResponse:
        """
        Convert a decoded vendor payload into a CanonicalResponse.

        Raises:
            InvalidResponseError: If the payload has no assistant turn.
        """

    async def fetch_models(self) -> List[str]:
        """
        Query the vendor's live model listing.

        Only adapters whose config has a ``models_endpoint`` override this.
        """
        raise ProviderUnavailableError(
            f"{self.provider_name} has no model listing endpoint", self.provider_name
        )

    # ------------------------------------------------------------------
    # Shared behaviour
    # ------------------------------------------------------------------

    async def get_models(self) -> List[str]:
        """
        Get the models offered by the provider.

        Static catalogs from the config are returned without a network call.

        Returns:
            List[str]: Model identifiers.

        Raises:
            ProviderUnavailableError: If the adapter has no transport.
        """
        self._require_http()
        if self.config.models:
            return list(self.config.models)
        return await self.fetch_models()

    async def chat(self, messages: Sequence[Message], options: Optional[Dict[str, Any]] = None) -> CanonicalResponse:
        """
        Send one chat request: format, POST, parse.

        HTTP status errors are raised as ``httpx.HTTPStatusError``; a body
        that is not JSON raises InvalidResponseError.
        """
        options = options or {}
        request = self.format_request(messages, options)
        http = self._require_http()

        response = await http.post(request.url, json=request.body, headers=request.headers)
        response.raise_for_status()
        try:
            payload = response.json()
        except ValueError as exc:
            raise InvalidResponseError(
                f"{self.provider_name} returned a non-JSON body", self.provider_name
            ) from exc
        return self.parse_response(payload)

    def _require_http(self) -> httpx.AsyncClient:
        if self.http is None:
            raise ProviderUnavailableError(
                f"{self.provider_name} provider is not initialized", self.provider_name
            )
        return self.http

    def _validate(self, messages: Sequence[Message], options: Dict[str, Any]) -> str:
        """Check the common request preconditions and return the model to use."""
        if not messages:
            raise InvalidRequestError("messages must not be empty")
        model = options.get("model") or self.config.default_model
        if not model:
            raise InvalidRequestError(f"A model is required for {self.provider_name}")
        return model

    def _listing(self, payload: Any, key: str, field: str) -> List[str]:
        """Read ``payload[key][*][field]`` from a model listing, checking each level."""
        entries = payload.get(key) if isinstance(payload, dict) else None
        if not isinstance(entries, list) or not all(
            isinstance(entry, dict) and isinstance(entry.get(field), str) for entry in entries
        ):
            raise ProviderUnavailableError(
                f"Unexpected model listing from {self.provider_name}", self.provider_name
            )
        return [entry[field] for entry in entries]

    def _invalid(self, reason: str) -> InvalidResponseError:
        return InvalidResponseError(f"{reason} from {self.provider_name}", self.provider_name)

    def _response(
        self,
        content: Optional[str],
        payload: Dict[str, Any],
        tool_calls: Optional[List[ToolCall]] = None,
    ) -> CanonicalResponse:
        result: CanonicalResponse = {
            "content": content,
            "role": "assistant",
            "provider": self.provider_name,
            "raw": payload,
        }
        if tool_calls:
            result["tool_calls"] = tool_calls
        return result

    @staticmethod
    def _tools(options: Dict[str, Any]) -> List[ToolDescriptor]:
        return [as_tool(tool) for tool in options.get("tools") or []]
