from dataclasses import dataclass
from enum import Enum


class PipelineStage(str, Enum):
    STARTED = "started"
    FETCHED_USER = "fetched_user"
    FETCHED_UPLOADS = "fetched_uploads"
    RECORD_CREATED = "record_created"
    DOWNLOADED = "downloaded"
    EXTRACTED = "extracted"
    GENERATED = "generated"
    RENDERED = "rendered"
    STORED = "stored"
    RECORD_UPDATED = "record_updated"
    NOTIFIED = "notified"


@dataclass(frozen=True)
class AnalysisStats:
    files_processed: int
    tokens_used: int
    cost_usd: float


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result of one pipeline invocation, shaped for the HTTP response."""

    success: bool
    status_code: int
    analysis_id: str | None = None
    processing_time_seconds: int = 0
    report_url: str | None = None
    stats: AnalysisStats | None = None
    email_sent: bool = False
    error: str | None = None
    error_message: str | None = None

    def to_payload(self) -> dict[str, object]:
        if not self.success:
            return {
                "success": False,
                "error": self.error,
                "errorMessage": self.error_message,
                "analysisId": self.analysis_id,
            }
        stats = self.stats or AnalysisStats(files_processed=0, tokens_used=0, cost_usd=0.0)
        return {
            "success": True,
            "analysisId": self.analysis_id,
            "reportUrl": self.report_url,
            "processingTime": self.processing_time_seconds,
            "stats": {
                "filesProcessed": stats.files_processed,
                "tokensUsed": stats.tokens_used,
                "costUSD": stats.cost_usd,
            },
            "emailSent": self.email_sent,
        }
