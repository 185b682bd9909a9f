import json

import httpx
import pytest

from llmgate.errors import (
    InvalidProviderError,
    InvalidRequestError,
    InvalidResponseError,
    InvalidToolError,
    MissingCredentialError,
    ProviderError,
    ProviderUnavailableError,
)
from llmgate.providers.anthropic import AnthropicProvider
from llmgate.providers.openai import OpenAIProvider
from llmgate.service import GatewayService
from llmgate.tools.registry import ToolDescriptor


def tool_call_payload(name, arguments="{}", call_id="call_1"):
    return {"choices": [{"message": {
        "role": "assistant",
        "content": None,
        "tool_calls": [{"id": call_id, "type": "function", "function": {"name": name, "arguments": arguments}}],
    }}]}


class Recorder:
    """Mock transport handler replaying canned payloads and keeping request bodies."""

    def __init__(self, *payloads, status_code=200):
        self.payloads = list(payloads)
        self.status_code = status_code
        self.bodies = []

    def __call__(self, request):
        self.bodies.append(json.loads(request.content) if request.content else None)
        payload = self.payloads.pop(0) if len(self.payloads) > 1 else self.payloads[0]
        return httpx.Response(self.status_code, json=payload)


class TestInitialize:
    def test_missing_credential(self):
        service = GatewayService("openai", OpenAIProvider)

        with pytest.raises(MissingCredentialError):
            service.initialize()
        assert not service.initialized

    def test_ollama_needs_no_credential(self, mock_client_factory):
        from llmgate.providers.ollama import OllamaProvider
        service = GatewayService("ollama", OllamaProvider, mock_client_factory(Recorder({})))

        service.initialize()

        assert service.initialized

    def test_unknown_provider(self):
        service = GatewayService("nope", OpenAIProvider)

        with pytest.raises(InvalidProviderError):
            service.initialize("key")

    def test_initialize_twice_keeps_adapter(self, make_service):
        service = make_service("openai", Recorder({}))
        adapter = service.adapter

        service.initialize("other-key")

        assert service.adapter is adapter
        assert service.config.headers["Authorization"] == "Bearer test-key"


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_plain_text(self, make_service, openai_text):
        recorder = Recorder(openai_text("Hello, world!"))
        service = make_service("openai", recorder)

        response = await service.send_message([{"role": "user", "content": "hi"}], {"model": "gpt-4o"})

        assert response["content"] == "Hello, world!"
        assert response["provider"] == "openai"
        assert recorder.bodies[0]["model"] == "gpt-4o"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("provider", ["openai", "anthropic", "deepseek", "gemini", "ollama"])
    async def test_empty_messages_send_nothing(self, make_service, provider):
        recorder = Recorder({})
        service = make_service(provider, recorder)

        with pytest.raises(InvalidRequestError):
            await service.send_message([], {"model": "m"})
        assert recorder.bodies == []

    @pytest.mark.asyncio
    async def test_uninitialized(self):
        service = GatewayService("openai", OpenAIProvider)

        with pytest.raises(ProviderUnavailableError):
            await service.send_message([{"role": "user", "content": "hi"}])

    @pytest.mark.asyncio
    async def test_http_error_wrapped(self, make_service):
        service = make_service("openai", Recorder({"error": "boom"}, status_code=500))

        with pytest.raises(ProviderError) as exc_info:
            await service.send_message([{"role": "user", "content": "hi"}], {"model": "gpt-4o"})

        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)
        assert exc_info.value.provider == "openai"

    @pytest.mark.asyncio
    async def test_timeout_wrapped(self, make_service):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        service = make_service("openai", handler)

        with pytest.raises(ProviderError) as exc_info:
            await service.send_message([{"role": "user", "content": "hi"}], {"model": "gpt-4o"})

        assert isinstance(exc_info.value.__cause__, httpx.TimeoutException)

    @pytest.mark.asyncio
    async def test_invalid_response(self, make_service):
        service = make_service("openai", Recorder({"choices": []}))

        with pytest.raises(InvalidResponseError):
            await service.send_message([{"role": "user", "content": "hi"}], {"model": "gpt-4o"})

    @pytest.mark.asyncio
    async def test_registered_tools_offered_by_default(self, make_service, openai_text):
        recorder = Recorder(openai_text())
        service = make_service("openai", recorder)
        service.register_tool(ToolDescriptor(name="t1", description="first", execute=lambda a, c: None))

        await service.send_message([{"role": "user", "content": "hi"}], {"model": "gpt-4o"})

        assert [t["function"]["name"] for t in recorder.bodies[0]["tools"]] == ["t1"]

    @pytest.mark.asyncio
    async def test_bad_tool_entry_not_wrapped(self, make_service):
        recorder = Recorder({})
        service = make_service("openai", recorder)

        with pytest.raises(InvalidToolError):
            await service.send_message([{"role": "user", "content": "hi"}], {"model": "gpt-4o", "tools": ["bogus"]})
        assert recorder.bodies == []


class TestToolLoop:
    @pytest.mark.asyncio
    async def test_executes_tool_and_resends(self, make_service, openai_text):
        recorder = Recorder(tool_call_payload("echo", '{"text": "ping"}'), openai_text("pong"))
        service = make_service("openai", recorder)
        seen = []

        async def echo(args, context):
            seen.append((args, context))
            return {"echo": args["text"]}

        service.register_tool(ToolDescriptor(
            name="echo", description="Echo text", execute=echo, progress_text="Echoing...",
        ))
        progress = []

        response = await service.send_message(
            [{"role": "user", "content": "say ping"}],
            {"model": "gpt-4o"},
            on_progress=progress.append,
        )

        assert response["content"] == "pong"
        assert seen[0][0] == {"text": "ping"}
        assert seen[0][1]["service"] is service
        assert progress == ["Thinking...", "Echoing...", None, "Thinking..."]

        resent = recorder.bodies[1]["messages"]
        assert resent[1]["role"] == "assistant"
        assert resent[1]["tool_calls"][0]["id"] == "call_1"
        assert resent[2] == {"role": "tool", "tool_call_id": "call_1", "content": '{"echo": "ping"}'}

    @pytest.mark.asyncio
    async def test_auto_execute_disabled(self, make_service):
        recorder = Recorder(tool_call_payload("echo"))
        service = make_service("openai", recorder)

        response = await service.send_message(
            [{"role": "user", "content": "hi"}],
            {"model": "gpt-4o", "auto_execute": False},
        )

        assert response["tool_calls"][0]["name"] == "echo"
        assert len(recorder.bodies) == 1

    @pytest.mark.asyncio
    async def test_round_limit(self, make_service):
        recorder = Recorder(tool_call_payload("echo"))
        service = make_service("openai", recorder)
        service.register_tool(ToolDescriptor(name="echo", description="Echo", execute=lambda a, c: "ok"))

        response = await service.send_message(
            [{"role": "user", "content": "hi"}],
            {"model": "gpt-4o", "max_tool_rounds": 2},
        )

        assert len(recorder.bodies) == 3
        assert response["tool_calls"]

    @pytest.mark.asyncio
    async def test_tool_failure_reported_to_model(self, make_service, openai_text):
        recorder = Recorder(tool_call_payload("missing"), openai_text("sorry"))
        service = make_service("openai", recorder)

        response = await service.send_message([{"role": "user", "content": "hi"}], {"model": "gpt-4o"})

        assert response["content"] == "sorry"
        tool_message = recorder.bodies[1]["messages"][-1]
        assert tool_message["role"] == "tool"
        assert tool_message["content"].startswith("Error: ")

    @pytest.mark.asyncio
    async def test_caller_tool_context(self, make_service, openai_text):
        recorder = Recorder(tool_call_payload("ctx"), openai_text())
        service = make_service("openai", recorder)
        contexts = []
        service.register_tool(ToolDescriptor(
            name="ctx", description="Record context", execute=lambda a, c: contexts.append(c),
        ))

        await service.send_message(
            [{"role": "user", "content": "hi"}],
            {"model": "gpt-4o", "tool_context": {"user": "u1"}},
        )

        assert contexts == [{"user": "u1"}]
        assert "tool_context" not in recorder.bodies[0]

    @pytest.mark.asyncio
    async def test_unoffered_tool_not_executed(self, make_service, openai_text):
        recorder = Recorder(tool_call_payload("t2"), openai_text("ok"))
        service = make_service("openai", recorder)
        executed = []
        t1 = service.register_tool(ToolDescriptor(name="t1", description="first", execute=lambda a, c: executed.append("t1")))
        service.register_tool(ToolDescriptor(name="t2", description="second", execute=lambda a, c: executed.append("t2")))

        await service.send_message([{"role": "user", "content": "hi"}], {"model": "gpt-4o", "tools": [t1]})

        assert executed == []
        assert recorder.bodies[1]["messages"][-1]["content"] == "Error: Tool not found: t2"

    @pytest.mark.asyncio
    async def test_empty_tool_list_disables_tools(self, make_service, openai_text):
        recorder = Recorder(tool_call_payload("t1"), openai_text("ok"))
        service = make_service("openai", recorder)
        executed = []
        service.register_tool(ToolDescriptor(name="t1", description="first", execute=lambda a, c: executed.append("t1")))

        await service.send_message([{"role": "user", "content": "hi"}], {"model": "gpt-4o", "tools": []})

        assert executed == []
        assert "tools" not in recorder.bodies[0]


class TestListModels:
    @pytest.mark.asyncio
    async def test_static_catalog(self, make_service):
        recorder = Recorder({})
        service = make_service("anthropic", recorder)

        models = await service.list_models()

        assert models == ["claude-3-5-sonnet-latest", "claude-3-5-haiku-latest", "claude-3-opus-latest"]
        assert recorder.bodies == []

    @pytest.mark.asyncio
    async def test_live_listing_filtered(self, make_service):
        recorder = Recorder({"data": [
            {"id": "gpt-4o"},
            {"id": "gpt-3.5-turbo-instruct"},
            {"id": "dall-e-3"},
            {"id": "gpt-4o-mini"},
        ]})
        service = make_service("openai", recorder)

        models = await service.list_models()

        assert models == ["gpt-4o", "gpt-4o-mini"]

    @pytest.mark.asyncio
    async def test_ollama_tags(self, make_service):
        service = make_service("ollama", Recorder({"models": [{"name": "llama2"}, {"name": "mistral"}]}))

        assert await service.list_models() == ["llama2", "mistral"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("provider,body", [
        ("ollama", []),
        ("ollama", {"models": ["llama2"]}),
        ("openai", {"data": ["gpt-4o"]}),
        ("openai", {"object": "list"}),
    ])
    async def test_malformed_listing(self, make_service, provider, body):
        service = make_service(provider, Recorder(body))

        with pytest.raises(ProviderUnavailableError):
            await service.list_models()

    @pytest.mark.asyncio
    async def test_listing_failure(self, make_service):
        service = make_service("openai", Recorder({"error": "nope"}, status_code=401))

        with pytest.raises(ProviderUnavailableError):
            await service.list_models()

    @pytest.mark.asyncio
    async def test_uninitialized(self):
        service = GatewayService("anthropic", AnthropicProvider)

        with pytest.raises(ProviderUnavailableError):
            await service.list_models()
