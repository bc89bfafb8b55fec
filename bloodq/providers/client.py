"""ProviderAdapter — abstract base for the per-provider wire encoders/decoders."""
import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, NamedTuple, Optional

from bloodq.constants import (
    ANALYSIS_PROMPT,
    CONTENT_TYPE_JSON,
    CONTEXT_SUFFIX,
    HEADER_CONTENT_TYPE,
    MSG_ERR_API,
    MSG_ERR_DECODE,
)

_DATA_URI = re.compile(r"^data:(?P<mime>[^;,]+);base64,(?P<data>.+)$", re.DOTALL)


class AnalysisError(Exception):
    """Failure scoped to a single analysis call."""


class ProviderHTTPError(AnalysisError):

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(MSG_ERR_API % (status_code, body))
        self.status_code = status_code
        self.body = body


class ResponseDecodeError(AnalysisError):

    def __init__(self, label: str, detail: str) -> None:
        super().__init__(MSG_ERR_DECODE % (label, detail))


class DataUri(NamedTuple):
    mime_type: str
    data: str
    uri: str


def parse_data_uri(image: str) -> Optional[DataUri]:
    """Split ``data:<mime>;base64,<payload>`` into its parts, or None if malformed."""
    match _DATA_URI.match(image):
        case None:
            return None
        case m:
            return DataUri(mime_type=m.group("mime"), data=m.group("data"), uri=image)


def build_prompt(context_text: Optional[str]) -> str:
    match context_text:
        case str() as ctx if ctx:
            return ANALYSIS_PROMPT + CONTEXT_SUFFIX % ctx
        case _:
            return ANALYSIS_PROMPT


@dataclass(frozen=True)
class ProviderCall:
    url: str
    headers: dict[str, str]
    body: dict[str, Any] = field(default_factory=dict)

    def content(self) -> bytes:
        return json.dumps(self.body).encode()


def json_headers(**extra: str) -> dict[str, str]:
    return {HEADER_CONTENT_TYPE: CONTENT_TYPE_JSON, **extra}


class ProviderAdapter(ABC):
    name: str
    label: str
    endpoint: str

    @abstractmethod
    def build_call(self, image: DataUri, context_text: Optional[str], api_key: str) -> ProviderCall:
        """Build the provider-specific HTTP request. Pure; never touches the network."""
        ...

    @abstractmethod
    def extract_text(self, payload: Any) -> Any:
        """Walk the provider's reply down to the assistant text. May raise lookup errors."""
        ...

    def decode(self, payload: Any) -> str:
        """Return the assistant text or raise ResponseDecodeError."""
        try:
            text = self.extract_text(payload)
        except (KeyError, IndexError, TypeError) as exc:
            raise ResponseDecodeError(self.label, f"missing {exc!r}") from exc
        match text:
            case str():
                return text
            case _:
                raise ResponseDecodeError(self.label, f"text is {type(text).__name__}")
