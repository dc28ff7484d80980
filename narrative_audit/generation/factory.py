from typing import ClassVar

from narrative_audit.config.settings import Settings
from narrative_audit.generation.client_base import BaseGenerationClient
from narrative_audit.generation.example_client_adapter import ExampleClientAdapter
from narrative_audit.generation.openai_client_adapter import OpenAIClientAdapter
from narrative_audit.generation.pricing import PriceTable
from narrative_audit.generation.report_generator import ReportGenerator


class ReportGeneratorFactory:
    """Creates the configured report generator."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "anthropic": "https://api.anthropic.com/v1/",
        "openrouter": "https://openrouter.ai/api/v1",
        "together": "https://api.together.xyz/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> ReportGenerator:
        """Create a configured report generator from application settings."""
        return ReportGenerator(
            client=cls.create_client(settings),
            model=settings.generation_model,
            max_tokens=settings.generation_max_tokens,
            temperature=settings.generation_temperature,
            prices=PriceTable(
                input_per_million=settings.generation_input_price_per_million,
                output_per_million=settings.generation_output_price_per_million,
            ),
            max_attempts=settings.generation_max_attempts,
            retry_delays_seconds=settings.generation_retry_delays_seconds,
        )

    @classmethod
    def create_client(cls, settings: Settings) -> BaseGenerationClient:
        provider = settings.generation_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        return OpenAIClientAdapter(
            api_key=settings.generation_api_key,
            timeout_seconds=settings.generation_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        override = settings.generation_base_url.strip()
        if provider == "openai":
            return override or None
        if provider == "openai_compatible":
            if not override:
                raise ValueError(
                    "generation_base_url is required for "
                    "generation_provider=openai_compatible"
                )
            return override
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return override or default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown generation provider '{provider}'. Choose from: {supported}"
        )
