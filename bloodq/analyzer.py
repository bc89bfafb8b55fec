"""Analyzer — validate, dispatch to a provider, send one request, decode the reply."""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx

from bloodq.constants import (
    MSG_ANALYSIS_FAIL,
    MSG_ANALYSIS_OK,
    MSG_ANALYZING,
    MSG_ERR_BAD_IMAGE,
    MSG_ERR_NO_API_KEY,
    MSG_ERR_NO_IMAGE,
    MSG_ERR_TRANSPORT,
    MSG_ERR_UNSUPPORTED_PROVIDER,
    PROVIDER_GEMINI,
)
from bloodq.providers.client import (
    AnalysisError,
    DataUri,
    ProviderAdapter,
    ProviderCall,
    ProviderHTTPError,
    ResponseDecodeError,
    parse_data_uri,
)
from bloodq.providers.registry import get_adapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisRequest:
    image: Optional[str]
    provider: str
    context_text: Optional[str] = None


@dataclass(frozen=True)
class AnalysisResult:
    text: str
    provider: str
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "provider": self.provider, "timestamp": self.timestamp}


@dataclass(frozen=True)
class AnalysisOutcome:
    success: bool
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, result: AnalysisResult) -> "AnalysisOutcome":
        return cls(success=True, result=result)

    @classmethod
    def fail(cls, error: str) -> "AnalysisOutcome":
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        match self.result:
            case AnalysisResult() as result if self.success:
                return {"success": True, "result": result.to_dict()}
            case _:
                return {"success": False, "error": self.error}


def _now_millis() -> int:
    return int(time.time() * 1000)


# ── preconditions: pure, no network ─────────────────────────────────────────


def validate_image(image: Optional[str]) -> DataUri | str:
    """Return the parsed data URI, or the validation error message."""
    match image:
        case None | "":
            return MSG_ERR_NO_IMAGE
        case str() as uri:
            return parse_data_uri(uri) or MSG_ERR_BAD_IMAGE
        case _:
            return MSG_ERR_BAD_IMAGE


def resolve_credential(
    provider: str, api_key: Optional[str], default_gemini_key: Optional[str]
) -> Optional[str]:
    """Caller key wins; only Gemini falls back to the server default."""
    match (provider, api_key):
        case (_, str() as key) if key:
            return key
        case (p, _) if p == PROVIDER_GEMINI:
            return default_gemini_key or None
        case _:
            return None


# ── analyzer ──────────────────────────────────────────────────────────────────


class Analyzer:
    """Runs one analysis per call; holds configuration only, never per-call state."""

    def __init__(
        self,
        default_gemini_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], int] = _now_millis,
    ) -> None:
        self._default_gemini_key = default_gemini_key
        self._transport = transport
        self._clock = clock

    async def analyze(
        self, request: AnalysisRequest, api_key: Optional[str] = None
    ) -> AnalysisOutcome:
        match validate_image(request.image):
            case str() as error:
                return self._fail(request.provider, error)
            case image:
                pass

        match get_adapter(request.provider):
            case None:
                return self._fail(
                    request.provider, MSG_ERR_UNSUPPORTED_PROVIDER % request.provider
                )
            case adapter:
                pass

        match resolve_credential(adapter.name, api_key, self._default_gemini_key):
            case None:
                return self._fail(adapter.name, MSG_ERR_NO_API_KEY % adapter.label)
            case key:
                pass

        call = adapter.build_call(image, request.context_text, key)
        logger.info(MSG_ANALYZING, adapter.label)
        start = time.monotonic()
        try:
            text = await self._send(adapter, call)
        except AnalysisError as exc:
            return self._fail(adapter.name, str(exc))
        except httpx.HTTPError as exc:
            return self._fail(adapter.name, MSG_ERR_TRANSPORT % (str(exc) or type(exc).__name__))
        except (httpx.InvalidURL, UnicodeError) as exc:
            # key not encodable into the URL or a header
            return self._fail(adapter.name, MSG_ERR_TRANSPORT % (str(exc) or type(exc).__name__))

        logger.info(MSG_ANALYSIS_OK, adapter.label, time.monotonic() - start)
        return AnalysisOutcome.ok(
            AnalysisResult(text=text, provider=adapter.name, timestamp=self._clock())
        )

    async def _send(self, adapter: ProviderAdapter, call: ProviderCall) -> str:
        # No client-side timeout; the caller owns cancellation.
        async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
            response = await client.post(call.url, headers=call.headers, content=call.content())

        match response.is_success:
            case False:
                raise ProviderHTTPError(response.status_code, response.text)
            case True:
                pass

        try:
            payload = response.json()
        except ValueError as exc:
            raise ResponseDecodeError(adapter.label, f"invalid JSON ({exc})") from exc
        return adapter.decode(payload)

    def _fail(self, provider: str, error: str) -> AnalysisOutcome:
        logger.warning(MSG_ANALYSIS_FAIL, provider, error)
        return AnalysisOutcome.fail(error)
