from datetime import datetime

from psycopg.rows import dict_row

from narrative_audit.database.connection import get_connection
from narrative_audit.database.models import UploadRecord


class UploadsRepository:
    """Read access to the uploads table."""

    def find_recent_for_user(self, user_id: str, since: datetime) -> list[UploadRecord]:
        """Return the user's uploads with uploaded_at >= since, oldest first."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, user_id, filename, file_path, file_size, uploaded_at
                    FROM uploads
                    WHERE user_id = %s
                      AND uploaded_at >= %s
                    ORDER BY uploaded_at ASC
                    """,
                    (user_id, since),
                )
                rows = cur.fetchall()

        return [
            UploadRecord(
                id=str(row["id"]),
                user_id=str(row["user_id"]),
                filename=row["filename"],
                file_path=row["file_path"],
                file_size=int(row["file_size"] or 0),
                uploaded_at=row["uploaded_at"],
            )
            for row in rows
        ]
