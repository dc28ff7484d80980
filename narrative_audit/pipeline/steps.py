import secrets
from collections.abc import Callable
from datetime import datetime, timedelta

from narrative_audit.database.repositories.analyses_repository import AnalysesRepository
from narrative_audit.database.repositories.uploads_repository import UploadsRepository
from narrative_audit.database.repositories.users_repository import UsersRepository
from narrative_audit.extraction.extractor import TextExtractor
from narrative_audit.extraction.models import SourceFile
from narrative_audit.generation.models import GenerationFailure
from narrative_audit.generation.report_generator import ReportGenerator
from narrative_audit.logging.logger import Log
from narrative_audit.notification.base import EmailAttachment
from narrative_audit.notification.notifier import ReportNotifier
from narrative_audit.pipeline.exceptions import (
    DownloadError,
    ExtractionFailedError,
    NoUploadsFoundError,
    ReportGenerationError,
    UserNotFoundError,
)
from narrative_audit.pipeline.models import PipelineStage
from narrative_audit.pipeline.pipeline import PipelineContext, PipelineStep
from narrative_audit.pipeline.side_effects import run_non_fatal
from narrative_audit.rendering.base import BaseReportRenderer
from narrative_audit.storage.base import BaseObjectStore
from narrative_audit.storage.exceptions import StorageError

NO_TEXT_EXTRACTED = "Text extraction failed - no content extracted from files"
ATTACHMENT_BASENAME = "narrative-sparring-report"


def report_storage_path(prefix: str, user_id: str, created_at: datetime, extension: str) -> str:
    """Build a fresh, unguessable path: {prefix}/report-{user}-{ms}-{random}.{ext}"""
    timestamp_ms = int(created_at.timestamp() * 1000)
    name = f"report-{user_id}-{timestamp_ms}-{secrets.token_hex(8)}.{extension}"
    return f"{prefix.strip('/')}/{name}" if prefix.strip("/") else name


class FetchUserStep(PipelineStep):
    stage = PipelineStage.FETCHED_USER

    def __init__(self, users_repo: UsersRepository) -> None:
        self._users_repo = users_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        user = self._users_repo.find_by_id(context.user_id)
        if user is None:
            raise UserNotFoundError(f"User {context.user_id} not found")
        context.user = user
        return context


class FetchUploadsStep(PipelineStep):
    stage = PipelineStage.FETCHED_UPLOADS

    def __init__(
        self,
        uploads_repo: UploadsRepository,
        lookback_minutes: int,
    ) -> None:
        self._uploads_repo = uploads_repo
        self._lookback = timedelta(minutes=lookback_minutes)

    def run(self, context: PipelineContext) -> PipelineContext:
        since = context.started_at - self._lookback
        uploads = self._uploads_repo.find_recent_for_user(context.user_id, since)
        if not uploads:
            raise NoUploadsFoundError(
                f"No uploads for user {context.user_id} since {since.isoformat()}"
            )
        context.uploads = uploads
        Log.info(f"Found {len(uploads)} recent uploads for user {context.user_id}")
        return context


class CreateAnalysisRecordStep(PipelineStep):
    stage = PipelineStage.RECORD_CREATED

    def __init__(self, analyses_repo: AnalysesRepository) -> None:
        self._analyses_repo = analyses_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        record = self._analyses_repo.create_processing(context.user_id, context.started_at)
        context.analysis_id = record.id
        Log.info(f"Analysis {record.id} created for user {context.user_id}")
        return context


class DownloadUploadsStep(PipelineStep):
    stage = PipelineStage.DOWNLOADED

    def __init__(self, upload_store: BaseObjectStore) -> None:
        self._upload_store = upload_store

    def run(self, context: PipelineContext) -> PipelineContext:
        files: list[SourceFile] = []
        for upload in context.uploads:
            try:
                data = self._upload_store.get(upload.file_path)
            except StorageError as exc:
                raise DownloadError(f"Failed to download {upload.filename}: {exc}") from exc
            files.append(SourceFile(filename=upload.filename, raw_bytes=data, size=len(data)))
        context.source_files = files
        Log.info(
            f"Downloaded {len(files)} files for analysis {context.analysis_id}",
            total_bytes=sum(len(f.raw_bytes) for f in files),
        )
        return context


class ExtractTextStep(PipelineStep):
    stage = PipelineStage.EXTRACTED

    def __init__(self, extractor: TextExtractor) -> None:
        self._extractor = extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        batch = self._extractor.extract_all(context.source_files)
        if not batch.success:
            raise ExtractionFailedError(NO_TEXT_EXTRACTED)
        context.extraction = batch
        return context


class GenerateReportStep(PipelineStep):
    stage = PipelineStage.GENERATED

    def __init__(self, generator: ReportGenerator) -> None:
        self._generator = generator

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.extraction is None:
            raise ValueError("PipelineContext.extraction must be set before generation")
        result = self._generator.generate(context.extraction.combined_text)
        if isinstance(result, GenerationFailure):
            raise ReportGenerationError(result.error_message, error_code=result.error_code)
        context.report = result
        return context


class RenderReportStep(PipelineStep):
    stage = PipelineStage.RENDERED

    def __init__(self, renderer: BaseReportRenderer, title: str) -> None:
        self._renderer = renderer
        self._title = title

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.report is None:
            raise ValueError("PipelineContext.report must be set before rendering")
        context.rendered = self._renderer.render(context.report.report_text, self._title)
        Log.info(
            f"Rendered {context.rendered.extension} report for analysis {context.analysis_id}",
            size=len(context.rendered.content),
        )
        return context


class StoreReportStep(PipelineStep):
    stage = PipelineStage.STORED

    def __init__(
        self,
        report_store: BaseObjectStore,
        prefix: str,
        clock: Callable[[], datetime],
    ) -> None:
        self._report_store = report_store
        self._prefix = prefix
        self._clock = clock

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.rendered is None:
            raise ValueError("PipelineContext.rendered must be set before storing")
        path = report_storage_path(
            self._prefix, context.user_id, self._clock(), context.rendered.extension
        )
        context.stored = self._report_store.put(
            path, context.rendered.content, context.rendered.content_type
        )
        Log.info(f"Report for analysis {context.analysis_id} stored at {path}")
        return context


class CompleteAnalysisStep(PipelineStep):
    """Marks the analysis completed. A failed update is logged, never fatal."""

    stage = PipelineStage.RECORD_UPDATED

    def __init__(
        self,
        analyses_repo: AnalysesRepository,
        clock: Callable[[], datetime],
        timer: Callable[[], float],
    ) -> None:
        self._analyses_repo = analyses_repo
        self._clock = clock
        self._timer = timer

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.report is None or context.stored is None or context.analysis_id is None:
            raise ValueError("PipelineContext is missing the stored report to complete")
        report = context.report
        content: dict[str, object] = {
            "report_url": context.stored.public_url,
            "tokens_used": report.tokens_used.to_dict(),
            "cost_usd": report.cost_usd.to_dict(),
            "model": report.model,
            "started_at": context.started_at.isoformat(),
            "completed_at": self._clock().isoformat(),
            "processing_time_seconds": round(self._timer() - context.started_clock),
        }
        analysis_id = context.analysis_id
        run_non_fatal(
            "complete_analysis",
            lambda: self._analyses_repo.mark_completed(analysis_id, content),
            analysis_id=analysis_id,
        )
        return context


class NotifyUserStep(PipelineStep):
    """Emails the report link. Delivery failures never change the analysis status."""

    stage = PipelineStage.NOTIFIED

    def __init__(self, notifier: ReportNotifier, attach_report: bool = False) -> None:
        self._notifier = notifier
        self._attach_report = attach_report

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.user is None or context.stored is None:
            raise ValueError("PipelineContext is missing the user or stored report to notify")
        user = context.user
        report_url = context.stored.public_url
        attachment = self._attachment(context)
        outcome = run_non_fatal(
            "notify_user",
            lambda: self._notifier.send_report(user, report_url, attachment),
            analysis_id=context.analysis_id,
        )
        context.email_sent = outcome.ok and outcome.value is not None and outcome.value.success
        return context

    def _attachment(self, context: PipelineContext) -> EmailAttachment | None:
        if not self._attach_report or context.rendered is None:
            return None
        return EmailAttachment(
            filename=f"{ATTACHMENT_BASENAME}.{context.rendered.extension}",
            content=context.rendered.content,
            content_type=context.rendered.content_type,
        )


class MarkFailedStep(PipelineStep):
    def __init__(self, analyses_repo: AnalysesRepository, clock: Callable[[], datetime]) -> None:
        self._analyses_repo = analyses_repo
        self._clock = clock

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.analysis_id is None:
            return context
        analysis_id = context.analysis_id
        run_non_fatal(
            "mark_failed",
            lambda: self._analyses_repo.mark_failed(
                analysis_id, context.error_message, self._clock()
            ),
            analysis_id=analysis_id,
        )
        Log.error(f"Analysis {analysis_id} marked as failed: {context.error_message}")
        return context


class NotifyFailureStep(PipelineStep):
    def __init__(self, notifier: ReportNotifier) -> None:
        self._notifier = notifier

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.user is None:
            return context
        user = context.user
        run_non_fatal(
            "notify_failure",
            lambda: self._notifier.send_failure(user, context.error_message),
            analysis_id=context.analysis_id,
        )
        return context
