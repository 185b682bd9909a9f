"""
Gateway service: one per provider, wrapping a provider adapter.

The service owns the provider configuration, the HTTP transport and the tool
registry, and exposes the two canonical operations ``list_models`` and
``send_message``.
"""
import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Type

import httpx

from .config import ProviderConfig, get_provider_endpoint
from .errors import (
    InvalidProviderError,
    InvalidRequestError,
    InvalidToolError,
    MissingCredentialError,
    ProviderError,
    ProviderUnavailableError,
)
from .providers.base import BaseLLMProvider
from .tools.registry import ToolDescriptor, ToolLike, ToolRegistry, as_tool
from .transport import create_llm_client
from .types import CanonicalResponse, Message, ToolCall
from .utils import (
    create_assistant_message_with_tool_calls,
    create_tool_result,
    load_arguments,
    stringify_result,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[Optional[str]], Any]

DEFAULT_MAX_TOOL_ROUNDS = 10
THINKING_TEXT = "Thinking..."


class GatewayService:
    """
    Uniform chat interface over one provider adapter.

    A service starts uninitialized; :meth:`initialize` binds the provider
    config and transport. Tools registered on the service are offered to the
    model on every request unless ``options["tools"]`` overrides them.
    """

    def __init__(
        self,
        provider: str,
        adapter_cls: Type[BaseLLMProvider],
        client_factory: Callable[[], httpx.AsyncClient] = create_llm_client,
    ):
        self.provider = provider.lower()
        self.adapter_cls = adapter_cls
        self.client_factory = client_factory
        self.config: Optional[ProviderConfig] = None
        self.adapter: Optional[BaseLLMProvider] = None
        self.tools = ToolRegistry()
        # Shared with tools when the caller supplies no context of its own
        self.tool_context: Dict[str, Any] = {"service": self}

    @property
    def initialized(self) -> bool:
        return self.adapter is not None

    def initialize(self, credential: Optional[str] = None) -> "GatewayService":
        """
        Bind configuration and transport.

        Initializing an already initialized service does nothing.

        Args:
            credential (str, optional): API key substituted into the header template.

        Returns:
            GatewayService: self.

        Raises:
            InvalidProviderError: If the provider is not in the endpoint table.
            MissingCredentialError: If the provider needs a key and none is given.
        """
        if self.initialized:
            return self

        config = get_provider_endpoint(self.provider, credential or "")
        if config is None:
            raise InvalidProviderError(self.provider)
        if config.requires_key and not credential:
            raise MissingCredentialError(self.provider)

        self.config = config
        self.adapter = self.adapter_cls(config, self.client_factory())
        logger.debug("Initialized %s service", self.provider)
        return self

    def _require_adapter(self) -> BaseLLMProvider:
        if self.adapter is None:
            raise ProviderUnavailableError(
                f"{self.provider} service not initialized. Call initialize() first.",
                self.provider,
            )
        return self.adapter

    # ==========================================================================
    # Tools
    # ==========================================================================

    def register_tool(self, tool: ToolLike) -> ToolDescriptor:
        return self.tools.register(tool)

    def get_tools(self) -> List[ToolDescriptor]:
        return self.tools.list()

    def get_tool(self, name: str) -> ToolDescriptor:
        return self.tools.get(name)

    # ==========================================================================
    # Canonical operations
    # ==========================================================================

    async def list_models(self) -> List[str]:
        """
        Get the models available from the provider.

        Raises:
            ProviderUnavailableError: If the service is not initialized or the
                listing request fails.
        """
        adapter = self._require_adapter()
        logger.debug("Fetching models from %s", self.provider)
        try:
            return await adapter.get_models()
        except ProviderUnavailableError:
            raise
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.error("Error fetching models from %s: %s", self.provider, exc)
            raise ProviderUnavailableError(
                f"Could not list models for {self.provider}: {exc}", self.provider
            ) from exc

    async def send_message(
        self,
        messages: Sequence[Message],
        options: Optional[Dict[str, Any]] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> CanonicalResponse:
        """
        Send a conversation to the provider and return the canonical response.

        When the model asks for tools and ``options["auto_execute"]`` is not
        False, the tools are run in order, their results appended as ``tool``
        messages and the conversation re-sent, for at most
        ``options["max_tool_rounds"]`` rounds.

        Args:
            messages (Sequence[Message]): Canonical conversation, never empty.
            options (Dict[str, Any], optional): ``model``, ``temperature``,
                ``max_tokens``, ``tools``, ``tool_context``, ``auto_execute``,
                ``max_tool_rounds``.
            on_progress (callable, optional): Receives status text such as
                "Thinking..." or a tool's progress text, and None to clear it.
                It may not be called at all.

        Returns:
            CanonicalResponse: The final assistant turn.

        Raises:
            InvalidRequestError: Empty messages or no model; nothing is sent.
            ProviderError: The provider call failed; the cause is chained.
        """
        if not messages:
            raise InvalidRequestError("messages must not be empty")
        adapter = self._require_adapter()

        options = dict(options or {})
        if "tools" not in options:
            options["tools"] = self.get_tools()
        auto_execute = options.pop("auto_execute", True)
        max_rounds = options.pop("max_tool_rounds", DEFAULT_MAX_TOOL_ROUNDS)
        context = options.pop("tool_context", None)
        if context is None:
            context = self.tool_context

        conversation = list(messages)
        response = await self._send(adapter, conversation, options, on_progress)

        rounds = 0
        while response.get("tool_calls") and auto_execute:
            if rounds >= max_rounds:
                logger.warning("Stopped after %d tool rounds with %s", rounds, self.provider)
                break
            rounds += 1

            tool_calls = response["tool_calls"]
            conversation.append(
                create_assistant_message_with_tool_calls(tool_calls, response.get("content") or None)
            )
            for tool_call in tool_calls:
                conversation.append(
                    await self._run_tool(tool_call, options["tools"], context, on_progress)
                )
            response = await self._send(adapter, conversation, options, on_progress)

        return response

    async def _send(
        self,
        adapter: BaseLLMProvider,
        messages: List[Message],
        options: Dict[str, Any],
        on_progress: Optional[ProgressCallback],
    ) -> CanonicalResponse:
        if on_progress is not None:
            on_progress(THINKING_TEXT)

        logger.debug("Sending message to %s", self.provider)
        try:
            return await adapter.chat(messages, options)
        except (InvalidRequestError, InvalidToolError, ProviderError) as exc:
            logger.error("Error in %s service: %s", self.provider, exc)
            raise
        except httpx.TimeoutException as exc:
            logger.error("%s request timed out", self.provider)
            raise ProviderError(f"{self.provider} request timed out", self.provider) from exc
        except httpx.HTTPStatusError as exc:
            logger.error("Error in %s service: %s", self.provider, exc)
            raise ProviderError(
                f"{self.provider} returned HTTP {exc.response.status_code}", self.provider
            ) from exc
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.error("Error in %s service: %s", self.provider, exc)
            raise ProviderError(f"{self.provider} request failed: {exc}", self.provider) from exc

    def _find_tool(self, name: str, offered: Sequence[ToolLike]) -> Optional[ToolDescriptor]:
        # Only tools offered on this request may run
        for tool in offered or []:
            descriptor = as_tool(tool)
            if descriptor.name == name:
                return descriptor
        return None

    async def _run_tool(
        self,
        tool_call: ToolCall,
        offered: Sequence[ToolLike],
        context: Any,
        on_progress: Optional[ProgressCallback],
    ) -> Message:
        """
        Execute one tool call and return its ``tool`` message.

        Failures are reported to the model as an "Error: ..." result.
        """
        name = tool_call["name"]
        tool = self._find_tool(name, offered)
        try:
            if tool is None:
                raise LookupError(f"Tool not found: {name}")
            if tool.progress_text and on_progress is not None:
                on_progress(tool.progress_text)

            args = load_arguments(tool_call.get("arguments"))
            logger.debug("Executing tool %s with args=%s", name, args)
            result = tool.execute(args, context)
            if asyncio.iscoroutine(result):
                result = await result
            content = stringify_result(result)
        except Exception as exc:  # noqa: BLE001
            logger.error("Error executing tool %s: %s", name, exc)
            content = f"Error: {exc}"
        finally:
            if on_progress is not None:
                on_progress(None)

        return create_tool_result(tool_call["id"], content, name=name)
