"""
Agent example: a data analyst with structured output feeding a content writer.
"""
import asyncio
import os

from rich.console import Console
from rich.status import Status

from llmgate import RichPrinter, default_registry, setup_logging
from llmgate.agents import AgentManager


async def main():
    setup_logging()
    console = Console()
    provider = os.getenv("DEFAULT_PROVIDER", "openai")

    service = default_registry().initialize_service(provider)
    console.print(f"[bold]{provider}[/bold] models: {', '.join(await service.list_models())}")

    manager = AgentManager(service)
    manager.create_agent(
        name="data_analyst",
        role="a data analyst who works through numbers step by step.",
        tools=["math_operations"],
        output_schema={
            "type": "object",
            "properties": {
                "summary": {"type": "string"},
                "total": {"type": "number"},
                "average": {"type": "number"},
            },
        },
    )
    manager.create_agent(
        name="content_writer",
        role="a writer who turns findings into short, friendly prose.",
        tools=["duckduckgo_search"],
    )

    failures = {name: error for name, error in (await manager.initialize_agents()).items() if error}
    if failures:
        console.print(f"[red]Agent setup failed:[/red] {failures}")
        return

    printer = RichPrinter(title="Agent")
    with Status("Working...", console=console) as status:
        def on_progress(text):
            status.update(text or "Working...")

        analysis = await manager.execute_task(
            "data_analyst",
            "Quarterly sales were 1200, 1850, 990 and 2210. Give the total and the average.",
            on_progress=on_progress,
        )
        article = await manager.execute_task(
            "content_writer",
            f"Write a two-sentence update for the sales team based on: {analysis}",
            on_progress=on_progress,
        )

    printer.print_result(analysis, title="data_analyst")
    printer.print_result(article, title="content_writer")


if __name__ == "__main__":
    asyncio.run(main())
