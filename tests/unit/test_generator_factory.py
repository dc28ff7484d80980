"""Tests for ReportGeneratorFactory."""

from unittest.mock import patch

import pytest

from narrative_audit.config.settings import Settings
from narrative_audit.generation.example_client_adapter import ExampleClientAdapter
from narrative_audit.generation.factory import ReportGeneratorFactory
from narrative_audit.generation.models import GeneratedReport
from narrative_audit.generation.report_generator import ReportGenerator


class TestReportGeneratorFactory:
    def test_example_provider_generates_without_network(self) -> None:
        settings = Settings(generation_provider="example")
        generator = ReportGeneratorFactory.create(settings)
        assert isinstance(generator, ReportGenerator)
        result = generator.generate("some materials")
        assert isinstance(result, GeneratedReport)
        assert result.model == "claude-sonnet-4-5"

    def test_example_client(self) -> None:
        client = ReportGeneratorFactory.create_client(Settings(generation_provider="example"))
        assert isinstance(client, ExampleClientAdapter)

    def test_anthropic_uses_compatibility_endpoint(self) -> None:
        settings = Settings(generation_provider="anthropic", generation_api_key="sk-ant")
        with patch("narrative_audit.generation.factory.OpenAIClientAdapter") as mock_adapter:
            ReportGeneratorFactory.create(settings)
        mock_adapter.assert_called_once_with(
            api_key="sk-ant",
            timeout_seconds=600,
            base_url="https://api.anthropic.com/v1/",
        )

    def test_openai_without_override_uses_sdk_default(self) -> None:
        settings = Settings(generation_provider="openai", generation_api_key="k")
        with patch("narrative_audit.generation.factory.OpenAIClientAdapter") as mock_adapter:
            ReportGeneratorFactory.create(settings)
        assert mock_adapter.call_args.kwargs["base_url"] is None

    def test_override_wins_over_provider_default(self) -> None:
        settings = Settings(
            generation_provider="openrouter",
            generation_api_key="k",
            generation_base_url="https://proxy.internal/v1",
        )
        with patch("narrative_audit.generation.factory.OpenAIClientAdapter") as mock_adapter:
            ReportGeneratorFactory.create(settings)
        assert mock_adapter.call_args.kwargs["base_url"] == "https://proxy.internal/v1"

    def test_openai_compatible_requires_base_url(self) -> None:
        settings = Settings(generation_provider="openai_compatible", generation_api_key="k")
        with pytest.raises(ValueError, match="generation_base_url is required"):
            ReportGeneratorFactory.create(settings)

    def test_unknown_provider_raises(self) -> None:
        settings = Settings(generation_provider="mystery")
        with pytest.raises(ValueError, match="Unknown generation provider"):
            ReportGeneratorFactory.create(settings)
