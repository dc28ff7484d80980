from datetime import datetime
from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from narrative_audit.database.connection import get_connection
from narrative_audit.database.exceptions import AnalysisTransitionError
from narrative_audit.database.models import (
    FULL_REPORT_ANALYSIS_TYPE,
    AnalysisRecord,
    AnalysisStatus,
)


class AnalysesRepository:
    """Database operations for the analyses table.

    Status lives inside the analysis_content JSON. Terminal updates only touch
    rows still in 'processing', so a finished record can never be resurrected
    or finished twice.
    """

    def create_processing(self, user_id: str, started_at: datetime) -> AnalysisRecord:
        """Insert a new full-report analysis in 'processing' status."""
        content: dict[str, object] = {
            "status": AnalysisStatus.PROCESSING.value,
            "started_at": started_at.isoformat(),
        }
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    INSERT INTO analyses (user_id, analysis_type, analysis_content, sent_to_user)
                    VALUES (%s, %s, %s, FALSE)
                    RETURNING id, created_at
                    """,
                    (user_id, FULL_REPORT_ANALYSIS_TYPE, Jsonb(content)),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("INSERT INTO analyses returned no row")

        return AnalysisRecord(
            id=str(row["id"]),
            user_id=user_id,
            analysis_content=content,
            sent_to_user=False,
            created_at=row["created_at"],
        )

    def mark_completed(self, analysis_id: str, content: dict[str, Any]) -> None:
        """Finish the analysis successfully; the report is considered delivered.

        Raises:
            AnalysisTransitionError: if the row is missing or no longer processing.
        """
        payload = {**content, "status": AnalysisStatus.COMPLETED.value}
        self._finish(analysis_id, payload, sent_to_user=True)

    def mark_failed(self, analysis_id: str, error_message: str, failed_at: datetime) -> None:
        """Finish the analysis as failed.

        Raises:
            AnalysisTransitionError: if the row is missing or no longer processing.
        """
        payload = {
            "status": AnalysisStatus.FAILED.value,
            "error_message": error_message,
            "failed_at": failed_at.isoformat(),
        }
        self._finish(analysis_id, payload, sent_to_user=False)

    def find_by_id(self, analysis_id: str) -> AnalysisRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, user_id, analysis_type, analysis_content,
                           sent_to_user, created_at
                    FROM analyses
                    WHERE id = %s
                    """,
                    (analysis_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return AnalysisRecord(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            analysis_type=row["analysis_type"],
            analysis_content=dict(row["analysis_content"] or {}),
            sent_to_user=bool(row["sent_to_user"]),
            created_at=row["created_at"],
        )

    def _finish(self, analysis_id: str, payload: dict[str, Any], sent_to_user: bool) -> None:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE analyses
                    SET analysis_content = %s,
                        sent_to_user = %s
                    WHERE id = %s
                      AND analysis_content->>'status' = %s
                    """,
                    (
                        Jsonb(payload),
                        sent_to_user,
                        analysis_id,
                        AnalysisStatus.PROCESSING.value,
                    ),
                )
                if cur.rowcount == 0:
                    raise AnalysisTransitionError(
                        f"Analysis {analysis_id} not found or no longer processing"
                    )
            conn.commit()
