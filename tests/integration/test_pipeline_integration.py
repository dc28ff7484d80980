from datetime import datetime
from pathlib import Path
from typing import Any

import psycopg
import pytest

from narrative_audit.database.models import AnalysisStatus, UserRecord
from narrative_audit.database.repositories.analyses_repository import AnalysesRepository
from narrative_audit.database.repositories.email_logs_repository import EmailLogsRepository
from narrative_audit.database.repositories.uploads_repository import UploadsRepository
from narrative_audit.database.repositories.users_repository import UsersRepository
from narrative_audit.extraction.extractor import TextExtractor
from narrative_audit.extraction.handlers import HtmlHandler, PdfPlumberHandler
from narrative_audit.generation.example_client_adapter import ExampleClientAdapter
from narrative_audit.generation.report_generator import ReportGenerator
from narrative_audit.notification.example_sender import ExampleEmailSender
from narrative_audit.notification.notifier import ReportNotifier
from narrative_audit.pipeline.orchestrator import PipelineDependencies, create_orchestrator
from narrative_audit.rendering.html_renderer import HtmlReportRenderer
from narrative_audit.storage.local_store import LocalObjectStore


def _write_upload(files_root: Path, user_id: str, filename: str, data: bytes) -> None:
    path = files_root / "uploads" / user_id / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


@pytest.mark.integration
class TestPipelineIntegration:
    def test_full_run_completes_analysis(
        self,
        seed_user: UserRecord,
        seed_uploads: datetime,
        db_conn: psycopg.Connection[Any],
        tmp_path: Path,
        sample_pdf_bytes: bytes,
    ) -> None:
        _write_upload(tmp_path, seed_user.id, "deck.pdf", sample_pdf_bytes)
        _write_upload(tmp_path, seed_user.id, "about.html", b"<p>We tell founder stories</p>")
        sender = ExampleEmailSender()
        orchestrator = create_orchestrator(
            PipelineDependencies(
                users=UsersRepository(),
                uploads=UploadsRepository(),
                analyses=AnalysesRepository(),
                upload_store=LocalObjectStore("uploads", "http://files.test", tmp_path),
                report_store=LocalObjectStore("reports", "http://files.test", tmp_path),
                extractor=TextExtractor({".pdf": PdfPlumberHandler(), ".html": HtmlHandler()}),
                generator=ReportGenerator(client=ExampleClientAdapter(), model="example"),
                renderer=HtmlReportRenderer(),
                notifier=ReportNotifier(sender, email_logs=EmailLogsRepository()),
                clock=lambda: seed_uploads,
            )
        )

        outcome = orchestrator.run(seed_user.id)

        assert outcome.success is True
        assert outcome.stats is not None
        assert outcome.stats.files_processed == 2
        assert outcome.email_sent is True
        assert outcome.analysis_id is not None
        record = AnalysesRepository().find_by_id(outcome.analysis_id)
        assert record is not None
        assert record.status is AnalysisStatus.COMPLETED
        assert record.analysis_content["report_url"] == outcome.report_url
        assert sender.sent[0].to == seed_user.email
        with db_conn.cursor() as cur:
            cur.execute(
                "SELECT email_type, status FROM email_logs WHERE user_id = %s",
                (seed_user.id,),
            )
            assert cur.fetchall() == [("report_delivery", "sent")]
        db_conn.commit()
