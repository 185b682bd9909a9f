import pytest
import httpx
from unittest.mock import AsyncMock, MagicMock

from llmgate.providers import ADAPTERS
from llmgate.service import GatewayService
from llmgate.transport import create_llm_client


@pytest.fixture
def mock_env(monkeypatch):
    """Mock environment variables for API keys."""
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-openai")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test-anthropic")
    monkeypatch.setenv("GOOGLE_API_KEY", "AIza-test-google")
    monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-test-deepseek")


@pytest.fixture
def mock_client_factory():
    """Build a client factory whose requests go to ``handler`` instead of the network."""
    def _factory(handler):
        return lambda: create_llm_client(transport=httpx.MockTransport(handler))
    return _factory


@pytest.fixture
def make_service(mock_client_factory):
    """Create an initialized GatewayService backed by a mock transport."""
    def _make(provider, handler, credential="test-key"):
        service = GatewayService(provider, ADAPTERS[provider], mock_client_factory(handler))
        return service.initialize(credential)
    return _make


@pytest.fixture
def openai_text():
    """Standard OpenAI chat completion payload with plain text."""
    def _payload(text="Hello, world!"):
        return {
            "id": "chatcmpl-1",
            "choices": [{"index": 0, "message": {"role": "assistant", "content": text}}],
            "usage": {"total_tokens": 10},
        }
    return _payload


@pytest.fixture
def mock_service():
    """A stand-in GatewayService for agent tests."""
    service = MagicMock()
    service.get_tools.return_value = []
    service.send_message = AsyncMock(return_value={
        "content": "done",
        "role": "assistant",
        "provider": "openai",
        "raw": {},
    })
    return service
