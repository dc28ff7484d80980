from datetime import datetime

from narrative_audit.database.connection import get_connection


class EmailLogsRepository:
    """Append-only log of notification attempts (email_logs table)."""

    def record(
        self,
        *,
        user_id: str,
        email_type: str,
        status: str,
        message_id: str | None,
        sent_at: datetime,
    ) -> None:
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO email_logs (user_id, email_type, status, resend_message_id, sent_at)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (user_id, email_type, status, message_id, sent_at),
            )
            conn.commit()
