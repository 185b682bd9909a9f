from typing import Any, Dict

from .openai import OpenAIProvider


class DeepseekProvider(OpenAIProvider):
    """
    Provider for the DeepSeek API (OpenAI-compatible).

    Models come from the static catalog; requests are never streamed.
    """

    provider_name = "deepseek"

    def _extra_body(self, options: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "stream": False,
            "temperature": options.get("temperature", 0.7),
        }
