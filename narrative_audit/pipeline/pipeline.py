from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from narrative_audit.database.models import UploadRecord, UserRecord
from narrative_audit.extraction.models import ExtractionBatch, SourceFile
from narrative_audit.generation.models import GeneratedReport
from narrative_audit.pipeline.models import PipelineStage
from narrative_audit.rendering.base import RenderedReport
from narrative_audit.storage.base import StoredObject


@dataclass(slots=True)
class PipelineContext:
    user_id: str
    started_at: datetime
    started_clock: float
    stage: PipelineStage = PipelineStage.STARTED
    user: UserRecord | None = None
    uploads: list[UploadRecord] = field(default_factory=list)
    analysis_id: str | None = None
    source_files: list[SourceFile] = field(default_factory=list)
    extraction: ExtractionBatch | None = None
    report: GeneratedReport | None = None
    rendered: RenderedReport | None = None
    stored: StoredObject | None = None
    email_sent: bool = False
    error_message: str = ""


class PipelineStep(ABC):
    stage: PipelineStage | None = None

    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
