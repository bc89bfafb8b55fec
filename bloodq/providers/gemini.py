"""GeminiAdapter — Google Gemini generateContent backend."""
from typing import Any, Optional

from bloodq.constants import (
    ANALYSIS_MAX_TOKENS,
    ANALYSIS_TEMPERATURE,
    GEMINI_ENDPOINT,
    GEMINI_IMAGE_MIME_TYPE,
    PROVIDER_GEMINI,
    PROVIDER_LABELS,
)
from bloodq.providers.client import (
    DataUri,
    ProviderAdapter,
    ProviderCall,
    build_prompt,
    json_headers,
)


class GeminiAdapter(ProviderAdapter):
    name = PROVIDER_GEMINI
    label = PROVIDER_LABELS[PROVIDER_GEMINI]
    endpoint = GEMINI_ENDPOINT

    def build_call(self, image: DataUri, context_text: Optional[str], api_key: str) -> ProviderCall:
        # Key travels in the query string; no auth header.
        return ProviderCall(
            url=f"{self.endpoint}?key={api_key}",
            headers=json_headers(),
            body={
                "contents": [
                    {
                        "parts": [
                            {"text": build_prompt(context_text)},
                            {
                                "inline_data": {
                                    "mime_type": GEMINI_IMAGE_MIME_TYPE,
                                    "data": image.data,
                                }
                            },
                        ]
                    }
                ],
                "generationConfig": {
                    "temperature": ANALYSIS_TEMPERATURE,
                    "maxOutputTokens": ANALYSIS_MAX_TOKENS,
                },
            },
        )

    def extract_text(self, payload: Any) -> Any:
        return payload["candidates"][0]["content"]["parts"][0]["text"]
