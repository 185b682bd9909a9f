from typing import Dict, Any, List, Sequence

from openai.types.chat import ChatCompletionMessageParam, ChatCompletionToolParam

from .base import BaseLLMProvider, LLMRequest
from ..config import settings
from ..types import CanonicalResponse, Message, ToolCall
from ..utils import create_tool_call


class OpenAIProvider(BaseLLMProvider):
    """
    Provider for the OpenAI chat completions API.

    DeepSeek speaks the same wire format and subclasses this adapter.
    """

    provider_name = "openai"

    def format_request(self, messages: Sequence[Message], options: Dict[str, Any]) -> LLMRequest:
        """
        Build a chat completions request.

        The model falls back to the DEFAULT_MODEL setting; OpenAI has no
        built-in default.
        """
        if not options.get("model") and not self.config.default_model and settings.default_model:
            options = {**options, "model": settings.default_model}
        model = self._validate(messages, options)

        body: Dict[str, Any] = {
            "model": model,
            "messages": self._convert_messages(messages),
        }
        optional_params = {
            "temperature": options.get("temperature"),
            "max_tokens": options.get("max_tokens"),
            "tools": self._convert_tools(options) or None,
        }
        body.update({k: v for k, v in optional_params.items() if v is not None})
        body.update(self._extra_body(options))

        return LLMRequest(url=self.config.endpoint, body=body, headers=dict(self.config.headers))

    def _extra_body(self, options: Dict[str, Any]) -> Dict[str, Any]:
        return {}

    def _convert_messages(self, messages: Sequence[Message]) -> List[ChatCompletionMessageParam]:
        """
        Convert canonical messages to OpenAI's format.

        Tool results keep their ``tool_call_id``; assistant turns with tool calls
        carry them in the ``function`` envelope with string arguments.
        """
        converted: List[ChatCompletionMessageParam] = []
        for msg in messages:
            role = msg.get("role") or "user"
            content = msg.get("content")

            if role == "tool":
                converted.append({
                    "role": "tool",
                    "tool_call_id": msg.get("tool_call_id", ""),
                    "content": content or "",
                })
                continue

            if role == "assistant" and msg.get("tool_calls"):
                converted.append({
                    "role": "assistant",
                    "content": content or None,
                    "tool_calls": [
                        {
                            "id": tc["id"],
                            "type": "function",
                            "function": {
                                "name": tc["name"],
                                "arguments": tc.get("arguments") or "{}",
                            },
                        }
                        for tc in msg["tool_calls"]
                    ],
                })
                continue

            converted.append({"role": role, "content": content or ""})
        return converted

    def _convert_tools(self, options: Dict[str, Any]) -> List[ChatCompletionToolParam]:
        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.parameters,
                },
            }
            for tool in self._tools(options)
        ]

    def parse_response(self, payload: Dict[str, Any]) -> CanonicalResponse:
        choices = payload.get("choices") if isinstance(payload, dict) else None
        if not choices:
            raise self._invalid("No response")

        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if not isinstance(message, dict):
            raise self._invalid("Missing message")

        tool_calls = self._parse_tool_calls(message)
        return self._response(message.get("content"), payload, tool_calls)

    @staticmethod
    def _parse_tool_calls(message: Dict[str, Any]) -> List[ToolCall]:
        tool_calls = []
        for tc in message.get("tool_calls") or []:
            function = tc.get("function") or {}
            if not function.get("name"):
                continue
            tool_calls.append(create_tool_call(
                function["name"],
                function.get("arguments"),
                id=tc.get("id"),
            ))
        return tool_calls

    async def fetch_models(self) -> List[str]:
        """
        List chat models from the models endpoint.

        Only ``gpt`` models are kept and ``instruct`` variants are dropped.
        """
        if not self.config.models_endpoint:
            return await super().fetch_models()

        http = self._require_http()
        response = await http.get(self.config.models_endpoint, headers=dict(self.config.headers))
        response.raise_for_status()
        ids = self._listing(response.json(), "data", "id")
        return [model_id for model_id in ids if "gpt" in model_id and "instruct" not in model_id]
