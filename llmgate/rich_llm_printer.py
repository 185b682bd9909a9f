"""
Rich console rendering for gateway responses and agent results.
"""
from typing import Any, Dict, Optional
from rich.console import Console, Group
from rich.markdown import Markdown
from rich.syntax import Syntax
from rich.panel import Panel
from rich.text import Text
import json

console = Console()


class RichPrinter:
    """
    Displays canonical responses from GatewayService.send_message.

    Attributes:
        title: Title for the display panel
        show_tool_calls: Whether to list tool calls under the content
        code_theme: Theme for code blocks
        inline_code_theme: Theme for inline code
        show_provider_info: Whether to show provider information in title
        border_style: Border style for the panel
    """

    def __init__(
        self,
        title: str = "Response",
        show_tool_calls: bool = True,
        code_theme: str = "coffee",
        inline_code_theme: str = "monokai",
        show_provider_info: bool = True,
        border_style: str = "green",
        console: Optional[Console] = None,
    ):
        self.title = title
        self.show_tool_calls = show_tool_calls
        self.code_theme = code_theme
        self.inline_code_theme = inline_code_theme
        self.show_provider_info = show_provider_info
        self.border_style = border_style
        self.console = console or globals()["console"]
        self._response: Optional[Dict[str, Any]] = None

    def print_chat(self, response: Dict[str, Any]) -> Dict[str, Any]:
        """
        Display a canonical response.

        Args:
            response: {"content", "role", "provider", "tool_calls"?, "raw"}

        Returns:
            The same response dictionary for chaining
        """
        self._response = response

        title = self._build_title(response.get("provider", ""))
        content = self._build_content(response.get("content") or "", response.get("tool_calls") or [])

        self.console.print(
            Panel(
                content,
                title=title,
                border_style=self.border_style,
                padding=(1, 2)
            )
        )
        return response

    def print_result(self, result: Any, title: Optional[str] = None) -> Any:
        """
        Display an agent result: canonical responses as chat, anything else as JSON.
        """
        if isinstance(result, dict) and "role" in result and "provider" in result:
            return self.print_chat(result)

        self.console.print(
            Panel(
                self._json(result),
                title=f"[bold]{title or self.title}[/bold]",
                border_style=self.border_style,
                padding=(1, 2)
            )
        )
        return result

    def _build_title(self, provider: str) -> str:
        title_parts = [f"[bold]{self.title}[/bold]"]

        if self.show_provider_info and provider:
            title_parts.append(f"[dim]({provider})[/dim]")

        return " ".join(title_parts)

    def _build_content(self, text: str, tool_calls: list) -> Any:
        body: Any
        if text.strip():
            body = Markdown(
                text,
                code_theme=self.code_theme,
                inline_code_theme=self.inline_code_theme
            )
        else:
            body = Text("(empty response)", style="dim italic")

        if self.show_tool_calls and tool_calls:
            calls_panel = Panel(
                self._json(tool_calls),
                title="[bold]Tool calls[/bold]",
                border_style="dim"
            )
            return Group(body, calls_panel)

        return body

    @staticmethod
    def _json(value: Any) -> Syntax:
        return Syntax(
            json.dumps(value, indent=2, default=str),
            "json",
            theme="lightbulb",
            background_color="default"
        )

    def get_response(self) -> Optional[Dict[str, Any]]:
        """Get the last printed response."""
        return self._response
