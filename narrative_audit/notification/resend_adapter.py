import base64

import httpx

from narrative_audit.notification.base import BaseEmailSender, EmailMessage
from narrative_audit.notification.exceptions import EmailDeliveryError


class ResendEmailSender(BaseEmailSender):
    """Sends email through the Resend HTTP API."""

    def __init__(
        self,
        *,
        api_key: str,
        sender: str,
        api_url: str = "https://api.resend.com",
        timeout_seconds: float = 30,
        http_client: httpx.Client | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("resend_api_key is required for email_provider=resend")
        self._sender = sender
        self._client = http_client or httpx.Client(
            base_url=api_url.rstrip("/"),
            timeout=timeout_seconds,
            headers={"Authorization": f"Bearer {api_key}"},
        )

    def send(self, message: EmailMessage) -> str:
        try:
            response = self._client.post("/emails", json=self._build_payload(message))
        except httpx.HTTPError as exc:
            raise EmailDeliveryError(f"Email request failed: {exc}") from exc

        if response.status_code >= 400:
            raise EmailDeliveryError(
                f"Email service returned {response.status_code}: {self._error_detail(response)}",
                status_code=response.status_code,
            )

        message_id = response.json().get("id")
        if not message_id:
            raise EmailDeliveryError("Email service response contained no message id")
        return str(message_id)

    def _build_payload(self, message: EmailMessage) -> dict[str, object]:
        payload: dict[str, object] = {
            "from": self._sender,
            "to": [message.to],
            "subject": message.subject,
            "html": message.html,
        }
        if message.text:
            payload["text"] = message.text
        if message.attachments:
            payload["attachments"] = [
                {
                    "filename": attachment.filename,
                    "content": base64.b64encode(attachment.content).decode("ascii"),
                    "content_type": attachment.content_type,
                }
                for attachment in message.attachments
            ]
        return payload

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict):
            return str(body.get("message") or body.get("error") or body)
        return str(body)
