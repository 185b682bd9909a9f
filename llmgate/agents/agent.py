import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from ..errors import StructuredOutputParseError, ToolNotFoundError
from ..types import Feedback, Message

logger = logging.getLogger(__name__)

# First fenced block, with or without a ``json`` language tag
JSON_BLOCK_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


def parse_structured_output(content: str) -> Any:
    """
    Read JSON from model output.

    A fenced code block wins when present; otherwise the whole content must
    be JSON.

    Raises:
        StructuredOutputParseError: If no JSON can be read.
    """
    match = JSON_BLOCK_RE.search(content)
    if match and match.group(1):
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError as exc:
            raise StructuredOutputParseError(f"Invalid JSON in response: {exc}") from exc

    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise StructuredOutputParseError(f"Response is not valid JSON: {exc}") from exc


class Agent:
    """
    A named role bound to a subset of a gateway's tools.

    The agent keeps its own conversation history, which grows by one user
    and one assistant message per completed task. Concurrent tasks on the
    same agent are not serialized.
    """

    def __init__(
        self,
        name: str,
        role: str,
        service,
        tools: Optional[Sequence[str]] = None,
        output_schema: Optional[Dict[str, Any]] = None,
    ):
        self.name = name
        self.role = role
        self.service = service
        self.tools: List[str] = list(tools or [])
        self.output_schema = output_schema
        self.history: List[Message] = []
        self.feedback: List[Feedback] = []

    async def initialize(self) -> None:
        """
        Check that every assigned tool is registered on the service.

        Raises:
            ToolNotFoundError: For the first assigned tool that is missing.
        """
        if self.service is None:
            raise ValueError("LLM service is required")

        available = {tool.name for tool in self.service.get_tools()}
        for tool_name in self.tools:
            if tool_name not in available:
                raise ToolNotFoundError(tool_name)

    async def execute_task(
        self,
        task: str,
        options: Optional[Dict[str, Any]] = None,
        on_progress=None,
    ) -> Any:
        """
        Run a task through the gateway.

        Sends the role prompt, the history and the task with only this
        agent's tools. Both the task and the reply are recorded in history
        before any structured parsing.

        Args:
            task (str): Task description sent as the user message.
            options (Dict[str, Any], optional): Request options; ``tools`` is replaced.
            on_progress (callable, optional): Progress callback passed to the service.

        Returns:
            The parsed JSON when an output schema is set and parsing succeeds,
            otherwise the canonical response.
        """
        user_message: Message = {"role": "user", "content": task}
        messages = [self.create_system_message(), *self.history, user_message]
        tool_options = {**(options or {}), "tools": self.get_tools_for_llm()}

        response = await self.service.send_message(messages, tool_options, on_progress)

        self.history.append(user_message)
        self.history.append({"role": "assistant", "content": response.get("content")})

        if self.output_schema and response.get("content"):
            try:
                return parse_structured_output(response["content"])
            except StructuredOutputParseError as exc:
                logger.warning("Error parsing structured output from agent %s: %s", self.name, exc)
        return response

    def create_system_message(self) -> Message:
        content = f"You are {self.name}, {self.role}"
        if self.output_schema:
            content += (
                "\n\nPlease provide your response in the following JSON format:\n"
                f"```json\n{json.dumps(self.output_schema, indent=2)}\n```"
            )
        return {"role": "system", "content": content}

    def get_tools_for_llm(self) -> list:
        return [tool for tool in self.service.get_tools() if tool.name in self.tools]

    def add_feedback(self, text: str) -> None:
        self.feedback.append({
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "text": text,
        })

    def clear_history(self) -> None:
        self.history = []

    def __repr__(self) -> str:
        return f"Agent(name={self.name!r}, tools={self.tools!r})"
