from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class EmailAttachment:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    html: str
    text: str = ""
    attachments: list[EmailAttachment] = field(default_factory=list)


class BaseEmailSender(ABC):
    """Contract for transactional email providers."""

    @abstractmethod
    def send(self, message: EmailMessage) -> str:
        """Send one email and return the provider message id.

        Raises:
            EmailDeliveryError: if the provider does not accept the message.
        """
