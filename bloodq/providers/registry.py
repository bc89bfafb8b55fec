"""Provider identifier → adapter lookup."""
from typing import Optional

from bloodq.providers.claude import ClaudeAdapter
from bloodq.providers.client import ProviderAdapter
from bloodq.providers.gemini import GeminiAdapter
from bloodq.providers.openai import OpenAIAdapter

ADAPTERS: dict[str, ProviderAdapter] = {
    adapter.name: adapter
    for adapter in (GeminiAdapter(), OpenAIAdapter(), ClaudeAdapter())
}


def get_adapter(provider: str) -> Optional[ProviderAdapter]:
    return ADAPTERS.get(provider)
