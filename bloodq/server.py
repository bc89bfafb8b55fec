"""FastAPI application exposing the analyzer over HTTP."""
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bloodq.analyzer import AnalysisRequest, Analyzer
from bloodq.constants import CALLER_KEY_HEADERS, MSG_ERR_UNKNOWN

logger = logging.getLogger(__name__)


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def parse_analysis_request(data: Any) -> AnalysisRequest:
    """Build an AnalysisRequest from the JSON body; ``imageBase64`` is accepted as an alias."""
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return AnalysisRequest(
        image=_optional_str(data.get("image", data.get("imageBase64"))),
        provider=str(data.get("provider", "")),
        context_text=_optional_str(data.get("contextText")),
    )


def create_app(analyzer: Analyzer) -> FastAPI:
    app = FastAPI(title="bloodq")
    app.state.analyzer = analyzer

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    @app.post("/api/analyze")
    async def analyze(request: Request) -> JSONResponse:
        try:
            analysis_request = parse_analysis_request(await request.json())
        except Exception as exc:
            logger.exception("Unreadable analyze request")
            return JSONResponse({"error": str(exc) or MSG_ERR_UNKNOWN}, status_code=500)

        header = CALLER_KEY_HEADERS.get(analysis_request.provider)
        api_key = request.headers.get(header) if header else None

        outcome = await request.app.state.analyzer.analyze(analysis_request, api_key or None)
        match outcome.success:
            case True:
                return JSONResponse(outcome.to_dict())
            case False:
                return JSONResponse({"error": outcome.error}, status_code=400)

    return app
