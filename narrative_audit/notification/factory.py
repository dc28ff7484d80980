from narrative_audit.config.settings import Settings
from narrative_audit.notification.base import BaseEmailSender
from narrative_audit.notification.example_sender import ExampleEmailSender
from narrative_audit.notification.resend_adapter import ResendEmailSender


class EmailSenderFactory:
    """Creates the configured email sender."""

    PROVIDERS = ("resend", "example")

    @classmethod
    def create(cls, settings: Settings) -> BaseEmailSender:
        provider = settings.email_provider.lower()
        if provider == "resend":
            return ResendEmailSender(
                api_key=settings.resend_api_key,
                sender=settings.email_from,
                api_url=settings.resend_api_url,
                timeout_seconds=settings.email_timeout_seconds,
            )
        if provider == "example":
            return ExampleEmailSender()
        raise ValueError(
            f"Unknown email provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
