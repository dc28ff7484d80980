from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from narrative_audit.logging.logger import Log
from narrative_audit.pipeline.exceptions import MissingUserIdError
from narrative_audit.pipeline.orchestrator import AnalysisOrchestrator


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userId")


def create_app(orchestrator: AnalysisOrchestrator) -> FastAPI:
    """Build the HTTP surface around a ready orchestrator."""
    app = FastAPI(title="Narrative Audit Worker")

    @app.exception_handler(RequestValidationError)
    async def invalid_request(_request: Request, exc: RequestValidationError) -> JSONResponse:
        Log.warning(f"Rejected malformed analyze request: {exc.errors()}")
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": MissingUserIdError.public_error,
                "errorMessage": "Request body must be JSON with a string userId",
                "analysisId": None,
            },
        )

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "timestamp": datetime.now(UTC).isoformat()}

    @app.post("/api/analyze")
    def analyze(request: AnalyzeRequest) -> JSONResponse:
        outcome = orchestrator.run(request.user_id)
        return JSONResponse(status_code=outcome.status_code, content=outcome.to_payload())

    return app
