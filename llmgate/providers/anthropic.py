import json
from typing import Dict, Any, List, Optional, Sequence, Tuple

from anthropic.types import MessageParam, ToolParam

from .base import BaseLLMProvider, LLMRequest
from ..errors import InvalidRequestError
from ..types import CanonicalResponse, Message, ToolCall
from ..utils import create_tool_call, load_arguments


class AnthropicProvider(BaseLLMProvider):
    """
    Provider for the Anthropic (Claude) messages API.
    """

    provider_name = "anthropic"

    def format_request(self, messages: Sequence[Message], options: Dict[str, Any]) -> LLMRequest:
        """
        Build a messages API request.

        Handles:
        - System prompt extraction (sent as the top-level ``system`` field).
        - Tool results folded into ``tool_result`` blocks of a user turn.
        - Assistant tool calls expressed as ``tool_use`` blocks.
        """
        model = self._validate(messages, options)
        system_text, converted_messages = self._convert_messages(messages)

        body: Dict[str, Any] = {
            "model": model,
            "messages": converted_messages,
            "max_tokens": options.get("max_tokens", 4096),
            "temperature": options.get("temperature", 0.7),
            "stream": False,
        }
        if system_text:
            body["system"] = system_text

        tools = self._convert_tools(options)
        if tools:
            body["tools"] = tools

        return LLMRequest(url=self.config.endpoint, body=body, headers=dict(self.config.headers))

    def _convert_messages(
        self,
        messages: Sequence[Message],
    ) -> Tuple[Optional[str], List[MessageParam]]:
        """
        Convert messages to Claude format.

        Anthropic has no ``system`` or ``tool`` roles. System text is joined
        into one string; consecutive tool results are merged into a single user
        turn so roles keep alternating.

        Returns:
            Tuple containing:
            - system_text: Extracted system prompt string (or None)
            - converted: List of message dicts suitable for the API
        """
        system_parts = []
        converted: List[MessageParam] = []

        for msg in messages:
            role = msg.get("role") or "user"
            content = msg.get("content")

            if role == "system":
                if content:
                    system_parts.append(content)
                continue

            if role == "tool":
                block = {
                    "type": "tool_result",
                    "tool_use_id": msg.get("tool_call_id", ""),
                    "content": content or "",
                }
                previous = converted[-1] if converted else None
                if (
                    previous is not None
                    and previous["role"] == "user"
                    and isinstance(previous["content"], list)
                    and all(b.get("type") == "tool_result" for b in previous["content"])
                ):
                    previous["content"].append(block)
                else:
                    converted.append({"role": "user", "content": [block]})
                continue

            if role == "assistant" and msg.get("tool_calls"):
                blocks: List[Dict[str, Any]] = []
                if content:
                    blocks.append({"type": "text", "text": content})
                for tc in msg["tool_calls"]:
                    try:
                        arguments = load_arguments(tc.get("arguments"))
                    except json.JSONDecodeError as exc:
                        raise InvalidRequestError(
                            f"Tool call {tc.get('id')} has invalid JSON arguments"
                        ) from exc
                    blocks.append({
                        "type": "tool_use",
                        "id": tc["id"],
                        "name": tc["name"],
                        "input": arguments,
                    })
                converted.append({"role": "assistant", "content": blocks})
                continue

            converted.append({
                "role": "assistant" if role == "assistant" else "user",
                "content": content or "",
            })

        system_text = "\n\n".join(system_parts) if system_parts else None
        return system_text, converted

    def _convert_tools(self, options: Dict[str, Any]) -> List[ToolParam]:
        """
        Claude uses 'input_schema' instead of 'parameters'.
        """
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "input_schema": tool.parameters,
            }
            for tool in self._tools(options)
        ]

    def parse_response(self, payload: Dict[str, Any]) -> CanonicalResponse:
        content = payload.get("content") if isinstance(payload, dict) else None
        if not content or not isinstance(content, list):
            raise self._invalid("No response")

        texts = [
            block.get("text", "") for block in content
            if isinstance(block, dict) and block.get("type") == "text"
        ]
        tool_calls = self._parse_tool_calls(content)
        if not texts and not tool_calls:
            raise self._invalid("No text or tool use in response")

        return self._response("".join(texts) if texts else None, payload, tool_calls)

    @staticmethod
    def _parse_tool_calls(content: List[Dict[str, Any]]) -> List[ToolCall]:
        """
        Extract ``tool_use`` blocks; their ``input`` object becomes JSON text.
        """
        tool_calls = []
        for block in content:
            if isinstance(block, dict) and block.get("type") == "tool_use":
                tool_calls.append(create_tool_call(
                    block.get("name", ""),
                    block.get("input"),
                    id=block.get("id"),
                ))
        return tool_calls
