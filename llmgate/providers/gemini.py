import json
import logging
from typing import Dict, Any, List, Sequence

from google.genai import types

from .base import BaseLLMProvider, LLMRequest
from ..errors import InvalidRequestError
from ..types import CanonicalResponse, Message, ToolCall
from ..utils import create_tool_call, load_arguments

logger = logging.getLogger(__name__)


class GeminiProvider(BaseLLMProvider):
    """
    Provider for the Google Gemini generateContent REST API.

    Gemini has no model listing here (static catalog) and returns no tool
    call ids, so ids are synthesized locally.
    """

    provider_name = "gemini"

    def format_request(self, messages: Sequence[Message], options: Dict[str, Any]) -> LLMRequest:
        """
        Build a generateContent request.

        Handles:
        - Role mapping (assistant -> model, system -> user).
        - Tool calls as ``function_call`` parts, tool results as ``function_response`` parts.
        - Tool declarations.
        """
        model = self._validate(messages, options)
        contents = self._convert_messages(messages)

        config = types.GenerationConfig(
            temperature=options.get("temperature", 0.7),
            max_output_tokens=options.get("max_tokens"),
        )

        body: Dict[str, Any] = {
            "contents": [c.model_dump(mode="json", exclude_none=True) for c in contents],
            "generation_config": config.model_dump(mode="json", exclude_none=True),
        }
        tools = self._convert_tools(options)
        if tools:
            body["tools"] = tools

        return LLMRequest(
            url=f"{self.config.endpoint}/{model}:generateContent",
            body=body,
            headers=dict(self.config.headers),
        )

    def _convert_messages(self, messages: Sequence[Message]) -> List[types.Content]:
        """
        Convert messages to Gemini contents.

        Tool results need the function name, which canonical tool messages
        may omit; it is recovered from the assistant turn that issued the call.
        """
        call_names: Dict[str, str] = {}
        contents = []

        for msg in messages:
            role = msg.get("role") or "user"
            content = msg.get("content")
            parts: List[types.Part] = []

            if role == "tool":
                call_id = msg.get("tool_call_id", "")
                name = msg.get("name") or call_names.get(call_id, "")
                parts.append(types.Part(
                    function_response=types.FunctionResponse(
                        name=name,
                        response={"result": content or ""},
                    )
                ))
                contents.append(types.Content(role="user", parts=parts))
                continue

            if content:
                parts.append(types.Part(text=content))

            for tc in msg.get("tool_calls") or []:
                call_names[tc["id"]] = tc["name"]
                try:
                    args = load_arguments(tc.get("arguments"))
                except json.JSONDecodeError as exc:
                    raise InvalidRequestError(
                        f"Tool call {tc.get('id')} has invalid JSON arguments"
                    ) from exc
                parts.append(types.Part(
                    function_call=types.FunctionCall(name=tc["name"], args=args)
                ))

            if not parts:
                parts.append(types.Part(text=""))

            # Gemini has no system role; system text becomes a user turn
            gemini_role = "model" if role == "assistant" else "user"
            contents.append(types.Content(role=gemini_role, parts=parts))

        return contents

    def _convert_tools(self, options: Dict[str, Any]) -> List[types.ToolDict]:
        tools: List[types.ToolDict] = []
        for tool in self._tools(options):
            for prop_name, prop in (tool.parameters.get("properties") or {}).items():
                if prop.get("type") == "object" and not prop.get("properties"):
                    logger.warning(
                        'Tool %s: property "%s" is type "object" with no properties; Gemini may reject it',
                        tool.name,
                        prop_name,
                    )
            tools.append({
                "function_declarations": [{
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.parameters,
                }]
            })
        return tools

    def parse_response(self, payload: Dict[str, Any]) -> CanonicalResponse:
        candidates = payload.get("candidates") if isinstance(payload, dict) else None
        if not candidates:
            raise self._invalid("No response")

        content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not parts:
            raise self._invalid("Invalid response format")

        texts = [p["text"] for p in parts if isinstance(p, dict) and p.get("text")]
        tool_calls = self._parse_tool_calls(parts)
        return self._response("".join(texts), payload, tool_calls)

    @staticmethod
    def _parse_tool_calls(parts: List[Dict[str, Any]]) -> List[ToolCall]:
        """
        Extract function calls. The REST API answers in camelCase
        (``functionCall``); snake_case is accepted too.
        """
        tool_calls = []
        for part in parts:
            if not isinstance(part, dict):
                continue
            call = part.get("functionCall") or part.get("function_call")
            if not call or not call.get("name"):
                continue
            tool_calls.append(create_tool_call(call["name"], call.get("args"), id=call.get("id")))
        return tool_calls
