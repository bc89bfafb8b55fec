"""OpenAIAdapter — OpenAI chat completions vision backend."""
from typing import Any, Optional

from bloodq.constants import (
    ANALYSIS_MAX_TOKENS,
    ANALYSIS_TEMPERATURE,
    HEADER_AUTHORIZATION,
    OPENAI_ENDPOINT,
    OPENAI_VISION_MODEL,
    PROVIDER_LABELS,
    PROVIDER_OPENAI,
)
from bloodq.providers.client import (
    DataUri,
    ProviderAdapter,
    ProviderCall,
    build_prompt,
    json_headers,
)


class OpenAIAdapter(ProviderAdapter):
    name = PROVIDER_OPENAI
    label = PROVIDER_LABELS[PROVIDER_OPENAI]
    endpoint = OPENAI_ENDPOINT

    def build_call(self, image: DataUri, context_text: Optional[str], api_key: str) -> ProviderCall:
        return ProviderCall(
            url=self.endpoint,
            headers=json_headers(**{HEADER_AUTHORIZATION: f"Bearer {api_key}"}),
            body={
                "model": OPENAI_VISION_MODEL,
                "messages": [
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": build_prompt(context_text)},
                            # full data URI, prefix kept
                            {"type": "image_url", "image_url": {"url": image.uri}},
                        ],
                    }
                ],
                "max_tokens": ANALYSIS_MAX_TOKENS,
                "temperature": ANALYSIS_TEMPERATURE,
            },
        )

    def extract_text(self, payload: Any) -> Any:
        return payload["choices"][0]["message"]["content"]
