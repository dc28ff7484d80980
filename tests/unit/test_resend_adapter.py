import base64
import json
from collections.abc import Callable

import httpx
import pytest

from narrative_audit.notification.base import EmailAttachment, EmailMessage
from narrative_audit.notification.exceptions import EmailDeliveryError
from narrative_audit.notification.resend_adapter import ResendEmailSender


def _sender(
    handler: Callable[[httpx.Request], httpx.Response],
) -> tuple[ResendEmailSender, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    client = httpx.Client(
        base_url="https://api.resend.test",
        transport=httpx.MockTransport(record),
        headers={"Authorization": "Bearer re_test"},
    )
    sender = ResendEmailSender(
        api_key="re_test",
        sender="Reports <reports@example.com>",
        http_client=client,
    )
    return sender, requests


def _message(**overrides: object) -> EmailMessage:
    fields: dict[str, object] = {
        "to": "buyer@example.com",
        "subject": "Your report",
        "html": "<p>Hi</p>",
        "text": "Hi",
    }
    fields.update(overrides)
    return EmailMessage(**fields)  # type: ignore[arg-type]


class TestResendEmailSender:
    def test_posts_message_and_returns_id(self) -> None:
        sender, requests = _sender(lambda _: httpx.Response(200, json={"id": "msg_123"}))

        message_id = sender.send(_message())

        assert message_id == "msg_123"
        assert len(requests) == 1
        request = requests[0]
        assert request.method == "POST"
        assert request.url.path == "/emails"
        assert request.headers["Authorization"] == "Bearer re_test"
        assert json.loads(request.content) == {
            "from": "Reports <reports@example.com>",
            "to": ["buyer@example.com"],
            "subject": "Your report",
            "html": "<p>Hi</p>",
            "text": "Hi",
        }

    def test_attachments_are_base64_encoded(self) -> None:
        sender, requests = _sender(lambda _: httpx.Response(200, json={"id": "msg_1"}))
        attachment = EmailAttachment(
            filename="report.pdf", content=b"%PDF-1.4", content_type="application/pdf"
        )

        sender.send(_message(text="", attachments=[attachment]))

        payload = json.loads(requests[0].content)
        assert "text" not in payload
        assert payload["attachments"] == [
            {
                "filename": "report.pdf",
                "content": base64.b64encode(b"%PDF-1.4").decode("ascii"),
                "content_type": "application/pdf",
            }
        ]

    def test_error_status_raises_with_detail(self) -> None:
        sender, _ = _sender(
            lambda _: httpx.Response(422, json={"message": "Invalid `to` field"})
        )

        with pytest.raises(EmailDeliveryError, match="returned 422: Invalid `to` field") as exc:
            sender.send(_message())
        assert exc.value.status_code == 422

    def test_non_json_error_body(self) -> None:
        sender, _ = _sender(lambda _: httpx.Response(502, text="Bad gateway"))

        with pytest.raises(EmailDeliveryError, match="502: Bad gateway"):
            sender.send(_message())

    def test_transport_error_raises_delivery_error(self) -> None:
        def fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        sender, _ = _sender(fail)

        with pytest.raises(EmailDeliveryError, match="Email request failed"):
            sender.send(_message())

    def test_missing_id_raises(self) -> None:
        sender, _ = _sender(lambda _: httpx.Response(200, json={}))

        with pytest.raises(EmailDeliveryError, match="no message id"):
            sender.send(_message())

    def test_requires_api_key(self) -> None:
        with pytest.raises(ValueError, match="resend_api_key"):
            ResendEmailSender(api_key="", sender="reports@example.com")
