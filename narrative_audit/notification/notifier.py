from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from narrative_audit.database.models import UserRecord
from narrative_audit.database.repositories.email_logs_repository import EmailLogsRepository
from narrative_audit.logging.logger import Log
from narrative_audit.notification.base import BaseEmailSender, EmailAttachment, EmailMessage
from narrative_audit.notification.messages import build_error_email, build_report_email

REPORT_DELIVERY = "report_delivery"
ERROR_NOTIFICATION = "error_notification"


@dataclass(frozen=True)
class NotificationResult:
    success: bool
    message_id: str | None = None
    error: str | None = None


class ReportNotifier:
    """Sends report and failure emails and logs every attempt.

    Never raises: delivery problems are returned as an unsuccessful
    NotificationResult, and email-log write failures are only logged.
    """

    def __init__(
        self,
        sender: BaseEmailSender,
        email_logs: EmailLogsRepository | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._sender = sender
        self._email_logs = email_logs
        self._clock = clock

    def send_report(
        self,
        user: UserRecord,
        report_url: str,
        attachment: EmailAttachment | None = None,
    ) -> NotificationResult:
        message = build_report_email(
            to=user.email,
            report_url=report_url,
            name=user.name,
            attachment=attachment,
        )
        return self._deliver(user, message, REPORT_DELIVERY)

    def send_failure(self, user: UserRecord, error_message: str) -> NotificationResult:
        message = build_error_email(to=user.email, error_message=error_message, name=user.name)
        return self._deliver(user, message, ERROR_NOTIFICATION)

    def _deliver(
        self,
        user: UserRecord,
        message: EmailMessage,
        email_type: str,
    ) -> NotificationResult:
        if not user.email:
            return NotificationResult(success=False, error="User has no email address")
        try:
            message_id = self._sender.send(message)
        except Exception as exc:
            Log.error(f"Failed to send {email_type} email to user {user.id}: {exc}")
            self._log_attempt(user.id, email_type, "failed", None)
            return NotificationResult(success=False, error=str(exc) or "Email delivery failed")

        Log.info(f"Sent {email_type} email to user {user.id}", message_id=message_id)
        self._log_attempt(user.id, email_type, "sent", message_id)
        return NotificationResult(success=True, message_id=message_id)

    def _log_attempt(
        self,
        user_id: str,
        email_type: str,
        status: str,
        message_id: str | None,
    ) -> None:
        if self._email_logs is None:
            return
        try:
            self._email_logs.record(
                user_id=user_id,
                email_type=email_type,
                status=status,
                message_id=message_id,
                sent_at=self._clock(),
            )
        except Exception as exc:
            Log.warning(f"Failed to record {email_type} email log for user {user_id}: {exc}")
