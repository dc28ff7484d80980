import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime

from narrative_audit.config.settings import Settings
from narrative_audit.database.repositories.analyses_repository import AnalysesRepository
from narrative_audit.database.repositories.email_logs_repository import EmailLogsRepository
from narrative_audit.database.repositories.uploads_repository import UploadsRepository
from narrative_audit.database.repositories.users_repository import UsersRepository
from narrative_audit.extraction.extractor import TextExtractor
from narrative_audit.extraction.factory import TextExtractorFactory
from narrative_audit.generation.factory import ReportGeneratorFactory
from narrative_audit.generation.report_generator import ReportGenerator
from narrative_audit.logging.logger import Log
from narrative_audit.notification.factory import EmailSenderFactory
from narrative_audit.notification.notifier import ReportNotifier
from narrative_audit.pipeline.exceptions import InputError, MissingUserIdError, PipelineError
from narrative_audit.pipeline.models import AnalysisOutcome, AnalysisStats
from narrative_audit.pipeline.pipeline import PipelineContext, PipelineStep
from narrative_audit.pipeline.steps import (
    CompleteAnalysisStep,
    CreateAnalysisRecordStep,
    DownloadUploadsStep,
    ExtractTextStep,
    FetchUploadsStep,
    FetchUserStep,
    GenerateReportStep,
    MarkFailedStep,
    NotifyFailureStep,
    NotifyUserStep,
    RenderReportStep,
    StoreReportStep,
)
from narrative_audit.rendering.base import BaseReportRenderer
from narrative_audit.rendering.factory import ReportRendererFactory
from narrative_audit.storage.base import BaseObjectStore
from narrative_audit.storage.factory import ObjectStoreFactory


def utc_now() -> datetime:
    return datetime.now(UTC)


class AnalysisOrchestrator:
    """Runs one analysis for one user: fetch -> extract -> generate -> render -> store -> notify.

    Input errors (unknown user, no recent uploads) fail fast before any record
    exists. Every other failure after the record is created runs the failure
    steps, which mark the record failed and notify the user. No failure ever
    propagates out of run().
    """

    def __init__(
        self,
        steps: Sequence[PipelineStep],
        failure_steps: Sequence[PipelineStep] = (),
        clock: Callable[[], datetime] = utc_now,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._steps = list(steps)
        self._failure_steps = list(failure_steps)
        self._clock = clock
        self._timer = timer

    def run(self, user_id: str | None) -> AnalysisOutcome:
        started_clock = self._timer()
        if not user_id:
            return self._input_failure(MissingUserIdError("userId is required"), started_clock)

        Log.info(f"Starting analysis for user {user_id}")
        context = PipelineContext(
            user_id=user_id,
            started_at=self._clock(),
            started_clock=started_clock,
        )
        try:
            for step in self._steps:
                context = step.run(context)
                if step.stage is not None:
                    context.stage = step.stage
            outcome = self._success(context, self._elapsed(started_clock))
        except InputError as exc:
            return self._input_failure(exc, started_clock)
        except Exception as exc:
            return self._handle_failure(context, exc)

        Log.info(
            f"Analysis {context.analysis_id} completed in {outcome.processing_time_seconds}s",
            user_id=user_id,
            email_sent=context.email_sent,
        )
        return outcome

    def _handle_failure(self, context: PipelineContext, exc: Exception) -> AnalysisOutcome:
        context.error_message = str(exc) or exc.__class__.__name__
        Log.exception(
            f"Analysis failed at stage '{context.stage.value}': {context.error_message}",
            user_id=context.user_id,
            analysis_id=context.analysis_id,
        )
        if context.analysis_id is not None:
            for step in self._failure_steps:
                context = step.run(context)
        public_error = exc.public_error if isinstance(exc, PipelineError) else "Analysis failed"
        return AnalysisOutcome(
            success=False,
            status_code=500,
            analysis_id=context.analysis_id,
            processing_time_seconds=self._elapsed(context.started_clock),
            error=public_error,
            error_message=context.error_message,
        )

    def _input_failure(self, exc: InputError, started_clock: float) -> AnalysisOutcome:
        Log.warning(f"Analysis rejected: {exc}")
        return AnalysisOutcome(
            success=False,
            status_code=exc.status_code,
            processing_time_seconds=self._elapsed(started_clock),
            error=exc.public_error,
            error_message=str(exc),
        )

    @staticmethod
    def _success(context: PipelineContext, elapsed: int) -> AnalysisOutcome:
        if context.report is None or context.extraction is None or context.stored is None:
            raise RuntimeError(f"Pipeline ended at stage '{context.stage.value}' without a report")
        return AnalysisOutcome(
            success=True,
            status_code=200,
            analysis_id=context.analysis_id,
            processing_time_seconds=elapsed,
            report_url=context.stored.public_url,
            stats=AnalysisStats(
                files_processed=context.extraction.successful_extractions,
                tokens_used=context.report.tokens_used.total,
                cost_usd=context.report.cost_usd.total,
            ),
            email_sent=context.email_sent,
        )

    def _elapsed(self, started_clock: float) -> int:
        return round(self._timer() - started_clock)


@dataclass
class PipelineDependencies:
    """Everything one analysis run talks to. Built once per process."""

    users: UsersRepository
    uploads: UploadsRepository
    analyses: AnalysesRepository
    upload_store: BaseObjectStore
    report_store: BaseObjectStore
    extractor: TextExtractor
    generator: ReportGenerator
    renderer: BaseReportRenderer
    notifier: ReportNotifier
    report_title: str = "Narrative Sparring Diagnostic Report"
    report_prefix: str = "reports"
    lookback_minutes: int = 10
    attach_report: bool = False
    clock: Callable[[], datetime] = field(default=utc_now)
    timer: Callable[[], float] = field(default=time.monotonic)


def build_analysis_steps(deps: PipelineDependencies) -> list[PipelineStep]:
    return [
        FetchUserStep(deps.users),
        FetchUploadsStep(deps.uploads, lookback_minutes=deps.lookback_minutes),
        CreateAnalysisRecordStep(deps.analyses),
        DownloadUploadsStep(deps.upload_store),
        ExtractTextStep(deps.extractor),
        GenerateReportStep(deps.generator),
        RenderReportStep(deps.renderer, title=deps.report_title),
        StoreReportStep(deps.report_store, prefix=deps.report_prefix, clock=deps.clock),
        CompleteAnalysisStep(deps.analyses, clock=deps.clock, timer=deps.timer),
        NotifyUserStep(deps.notifier, attach_report=deps.attach_report),
    ]


def build_failure_steps(deps: PipelineDependencies) -> list[PipelineStep]:
    return [
        MarkFailedStep(deps.analyses, clock=deps.clock),
        NotifyFailureStep(deps.notifier),
    ]


def create_orchestrator(deps: PipelineDependencies) -> AnalysisOrchestrator:
    return AnalysisOrchestrator(
        steps=build_analysis_steps(deps),
        failure_steps=build_failure_steps(deps),
        clock=deps.clock,
        timer=deps.timer,
    )


def build_orchestrator(settings: Settings) -> AnalysisOrchestrator:
    """Build an AnalysisOrchestrator with all required adapters."""
    deps = PipelineDependencies(
        users=UsersRepository(),
        uploads=UploadsRepository(),
        analyses=AnalysesRepository(),
        upload_store=ObjectStoreFactory.create_upload_store(settings),
        report_store=ObjectStoreFactory.create_report_store(settings),
        extractor=TextExtractorFactory.create(settings),
        generator=ReportGeneratorFactory.create(settings),
        renderer=ReportRendererFactory.create(settings),
        notifier=ReportNotifier(
            EmailSenderFactory.create(settings),
            email_logs=EmailLogsRepository(),
        ),
        report_title=settings.report_title,
        report_prefix=settings.report_prefix,
        lookback_minutes=settings.upload_lookback_minutes,
        attach_report=settings.email_attach_report,
    )
    return create_orchestrator(deps)
