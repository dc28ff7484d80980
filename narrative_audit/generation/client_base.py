from abc import ABC, abstractmethod

from narrative_audit.generation.models import ModelResponse


class BaseGenerationClient(ABC):
    """Contract for provider-specific generative model clients."""

    @abstractmethod
    def create_message(
        self,
        *,
        model: str,
        max_tokens: int,
        temperature: float,
        system_prompt: str,
        user_message: str,
    ) -> ModelResponse:
        """Send one request and return the text with token usage.

        Raises:
            GenerationServiceError: on any provider or network failure.
        """
