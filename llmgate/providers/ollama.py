import json
from typing import Dict, Any, List, Sequence

from .base import BaseLLMProvider, LLMRequest
from ..errors import InvalidRequestError
from ..types import CanonicalResponse, Message, ToolCall
from ..utils import create_tool_call, load_arguments


class OllamaProvider(BaseLLMProvider):
    """
    Provider for a local Ollama server (``/api/chat``).

    Needs no API key. Tool call arguments travel as objects and carry no ids.
    """

    provider_name = "ollama"

    def format_request(self, messages: Sequence[Message], options: Dict[str, Any]) -> LLMRequest:
        model = self._validate(messages, options)

        body: Dict[str, Any] = {
            "model": model,
            "messages": self._convert_messages(messages),
            "stream": False,
            "options": {
                "temperature": options.get("temperature", 0.7),
                "top_p": 0.9,
            },
        }
        tools = [
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
        if tools:
            body["tools"] = tools

        return LLMRequest(url=self.config.endpoint, body=body, headers=dict(self.config.headers))

    @staticmethod
    def _convert_messages(messages: Sequence[Message]) -> List[Dict[str, Any]]:
        converted = []
        for msg in messages:
            entry: Dict[str, Any] = {
                "role": msg.get("role") or "user",
                "content": msg.get("content") or "",
            }
            if msg.get("tool_calls"):
                calls = []
                for tc in msg["tool_calls"]:
                    try:
                        arguments = load_arguments(tc.get("arguments"))
                    except json.JSONDecodeError as exc:
                        raise InvalidRequestError(
                            f"Tool call {tc.get('id')} has invalid JSON arguments"
                        ) from exc
                    calls.append({"function": {"name": tc["name"], "arguments": arguments}})
                entry["tool_calls"] = calls
            if msg.get("role") == "tool" and msg.get("name"):
                entry["tool_name"] = msg["name"]
            converted.append(entry)
        return converted

    def parse_response(self, payload: Dict[str, Any]) -> CanonicalResponse:
        message = payload.get("message") if isinstance(payload, dict) else None
        if not isinstance(message, dict):
            raise self._invalid("No response")

        tool_calls = self._parse_tool_calls(message)
        content = message.get("content")
        if not content and not tool_calls:
            raise self._invalid("Empty message")
        return self._response(content, payload, tool_calls)

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
        http = self._require_http()
        response = await http.get(self.config.models_endpoint)
        response.raise_for_status()
        return self._listing(response.json(), "models", "name")
