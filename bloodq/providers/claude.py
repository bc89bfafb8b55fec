"""ClaudeAdapter — Anthropic Claude messages backend."""
from typing import Any, Optional

from bloodq.constants import (
    ANALYSIS_MAX_TOKENS,
    ANALYSIS_TEMPERATURE,
    CLAUDE_API_VERSION,
    CLAUDE_ENDPOINT,
    CLAUDE_VISION_MODEL,
    HEADER_CLAUDE_API_KEY,
    HEADER_CLAUDE_VERSION,
    PROVIDER_CLAUDE,
    PROVIDER_LABELS,
)
from bloodq.providers.client import (
    DataUri,
    ProviderAdapter,
    ProviderCall,
    build_prompt,
    json_headers,
)


class ClaudeAdapter(ProviderAdapter):
    name = PROVIDER_CLAUDE
    label = PROVIDER_LABELS[PROVIDER_CLAUDE]
    endpoint = CLAUDE_ENDPOINT

    def build_call(self, image: DataUri, context_text: Optional[str], api_key: str) -> ProviderCall:
        headers = json_headers(**{
            HEADER_CLAUDE_API_KEY: api_key,
            HEADER_CLAUDE_VERSION: CLAUDE_API_VERSION,
        })
        return ProviderCall(
            url=self.endpoint,
            headers=headers,
            body={
                "model": CLAUDE_VISION_MODEL,
                "max_tokens": ANALYSIS_MAX_TOKENS,
                "temperature": ANALYSIS_TEMPERATURE,
                "messages": [
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": build_prompt(context_text)},
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": image.mime_type,
                                    "data": image.data,
                                },
                            },
                        ],
                    }
                ],
            },
        )

    def extract_text(self, payload: Any) -> Any:
        return payload["content"][0]["text"]
