from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

FULL_REPORT_ANALYSIS_TYPE = "full_report"


class AnalysisStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class UserRecord:
    """Represents a row from the users table (subset of columns)."""

    id: str
    email: str
    name: str | None = None
    purchase_tier: str | None = None


@dataclass(frozen=True)
class UploadRecord:
    """Represents a row from the uploads table. Read-only to the pipeline."""

    id: str
    user_id: str
    filename: str
    file_path: str
    file_size: int
    uploaded_at: datetime


@dataclass
class AnalysisRecord:
    """Represents a row from the analyses table."""

    id: str
    user_id: str
    analysis_type: str = FULL_REPORT_ANALYSIS_TYPE
    analysis_content: dict[str, object] = field(default_factory=dict)
    sent_to_user: bool = False
    created_at: datetime | None = None

    @property
    def status(self) -> AnalysisStatus | None:
        raw = self.analysis_content.get("status")
        if raw is None:
            return None
        return AnalysisStatus(str(raw))
