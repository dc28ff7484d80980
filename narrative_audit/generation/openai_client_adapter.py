import httpx
import openai

from narrative_audit.generation.client_base import BaseGenerationClient
from narrative_audit.generation.exceptions import GenerationError, GenerationServiceError
from narrative_audit.generation.models import ModelResponse


class OpenAIClientAdapter(BaseGenerationClient):
    """Generation client built on the OpenAI-compatible chat completions API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    def create_message(
        self,
        *,
        model: str,
        max_tokens: int,
        temperature: float,
        system_prompt: str,
        user_message: str,
    ) -> ModelResponse:
        try:
            response = self._client.chat.completions.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_message},
                ],
            )
        except (openai.APITimeoutError, httpx.TimeoutException) as exc:
            raise GenerationServiceError(
                f"Model service timed out: {exc}", code="timeout"
            ) from exc
        except (openai.APIConnectionError, httpx.ConnectError) as exc:
            raise GenerationServiceError(
                f"Model service connection error: {exc}", code="connection_error"
            ) from exc
        except openai.APIStatusError as exc:
            raise GenerationServiceError(
                _status_error_message(exc),
                status_code=exc.status_code,
                code=_string_or_none(getattr(exc, "code", None)),
            ) from exc
        except openai.APIError as exc:
            raise GenerationServiceError(
                f"Model service API error: {exc.message}",
                code=_string_or_none(exc.code) or "api_error",
            ) from exc

        if not response.choices:
            raise GenerationError("Model returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise GenerationError("Model returned empty response")

        usage = response.usage
        return ModelResponse(
            text=content,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
        )


def _status_error_message(exc: openai.APIStatusError) -> str:
    body = exc.body
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return exc.message


def _string_or_none(value: object) -> str | None:
    if value is None:
        return None
    return str(value)
