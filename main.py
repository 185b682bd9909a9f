import asyncio
from llmgate import RichPrinter, default_registry, setup_logging
from llmgate.errors import LLMGatewayError


async def compare_providers():
    setup_logging()
    registry = default_registry()
    printer = RichPrinter()

    messages = [
        {"role": "user", "content": "What is the capital of France?"},
    ]

    providers = [
        ("openai", "gpt-4o"),
        ("anthropic", "claude-3-5-haiku-latest"),
        ("gemini", "gemini-2.0-flash"),
        ("deepseek", "deepseek-chat"),
    ]

    for provider, model in providers:
        try:
            response = await registry.send_message(
                messages,
                {"provider": provider, "model": model},
            )
            printer.print_chat(response)
        except LLMGatewayError as e:
            print(f"{provider}: Error - {e}")

asyncio.run(compare_providers())
