from datetime import UTC, datetime
from unittest.mock import MagicMock

from narrative_audit.database.models import UserRecord
from narrative_audit.notification.base import EmailAttachment
from narrative_audit.notification.example_sender import ExampleEmailSender
from narrative_audit.notification.exceptions import EmailDeliveryError
from narrative_audit.notification.messages import (
    DEFAULT_ERROR_TEXT,
    ERROR_SUBJECT,
    REPORT_SUBJECT,
    build_error_email,
    build_report_email,
)
from narrative_audit.notification.notifier import (
    ERROR_NOTIFICATION,
    REPORT_DELIVERY,
    ReportNotifier,
)

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
USER = UserRecord(id="user-1", email="buyer@example.com", name="Dana")


def _notifier(sender: MagicMock | ExampleEmailSender) -> tuple[ReportNotifier, MagicMock]:
    email_logs = MagicMock()
    return ReportNotifier(sender, email_logs=email_logs, clock=lambda: FIXED_NOW), email_logs


class TestReportNotifier:
    def test_send_report_logs_sent_attempt(self) -> None:
        sender = MagicMock()
        sender.send.return_value = "msg_1"
        notifier, email_logs = _notifier(sender)

        result = notifier.send_report(USER, "https://cdn/report.html")

        assert result.success is True
        assert result.message_id == "msg_1"
        message = sender.send.call_args[0][0]
        assert message.to == "buyer@example.com"
        assert message.subject == REPORT_SUBJECT
        assert "https://cdn/report.html" in message.html
        email_logs.record.assert_called_once_with(
            user_id="user-1",
            email_type=REPORT_DELIVERY,
            status="sent",
            message_id="msg_1",
            sent_at=FIXED_NOW,
        )

    def test_delivery_failure_is_returned_and_logged(self) -> None:
        sender = MagicMock()
        sender.send.side_effect = EmailDeliveryError("Email service returned 500: boom")
        notifier, email_logs = _notifier(sender)

        result = notifier.send_report(USER, "https://cdn/report.html")

        assert result.success is False
        assert result.error == "Email service returned 500: boom"
        email_logs.record.assert_called_once_with(
            user_id="user-1",
            email_type=REPORT_DELIVERY,
            status="failed",
            message_id=None,
            sent_at=FIXED_NOW,
        )

    def test_email_log_failure_does_not_fail_delivery(self) -> None:
        sender = MagicMock()
        sender.send.return_value = "msg_2"
        notifier, email_logs = _notifier(sender)
        email_logs.record.side_effect = RuntimeError("db down")

        result = notifier.send_failure(USER, "Rate limit exceeded - too many requests")

        assert result.success is True
        assert email_logs.record.call_args.kwargs["email_type"] == ERROR_NOTIFICATION

    def test_user_without_email_is_not_sent(self) -> None:
        sender = MagicMock()
        notifier, email_logs = _notifier(sender)

        result = notifier.send_report(UserRecord(id="user-2", email=""), "https://cdn/r.html")

        assert result.success is False
        sender.send.assert_not_called()
        email_logs.record.assert_not_called()

    def test_works_without_email_log(self) -> None:
        sender = ExampleEmailSender()
        notifier = ReportNotifier(sender)

        result = notifier.send_failure(USER, "Analysis failed")

        assert result.success is True
        assert result.message_id is not None
        assert result.message_id.startswith("example-")
        assert sender.sent[0].subject == ERROR_SUBJECT


class TestMessages:
    def test_report_email_escapes_html(self) -> None:
        message = build_report_email(
            to="buyer@example.com",
            report_url="https://cdn/r.html?a=1&b=2",
            name="<Dana>",
        )

        assert "Hi &lt;Dana&gt;," in message.html
        assert 'href="https://cdn/r.html?a=1&amp;b=2"' in message.html
        assert "https://cdn/r.html?a=1&b=2" in message.text
        assert message.attachments == []

    def test_report_email_carries_attachment(self) -> None:
        attachment = EmailAttachment(
            filename="r.pdf", content=b"%PDF", content_type="application/pdf"
        )

        message = build_report_email(to="a@b.c", report_url="https://x", attachment=attachment)

        assert message.attachments == [attachment]
        assert "Hi there," in message.text

    def test_error_email_defaults_message(self) -> None:
        message = build_error_email(to="a@b.c", error_message="")

        assert message.subject == ERROR_SUBJECT
        assert f"Error: {DEFAULT_ERROR_TEXT}" in message.text
