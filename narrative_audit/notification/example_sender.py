import uuid

from narrative_audit.logging.logger import Log
from narrative_audit.notification.base import BaseEmailSender, EmailMessage


class ExampleEmailSender(BaseEmailSender):
    """Logs outgoing email instead of sending it. Intended for local runs."""

    def __init__(self) -> None:
        self.sent: list[EmailMessage] = []

    def send(self, message: EmailMessage) -> str:
        self.sent.append(message)
        message_id = f"example-{uuid.uuid4()}"
        Log.info(
            f"Example email to {message.to}: {message.subject}",
            message_id=message_id,
            attachments=len(message.attachments),
        )
        return message_id
