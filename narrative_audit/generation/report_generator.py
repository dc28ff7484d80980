"""Diagnostic report generation with retry/backoff and cost accounting."""

import time
from collections.abc import Callable, Sequence
from pathlib import Path

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_chain,
    wait_fixed,
    wait_none,
)
from tenacity.wait import wait_base

from narrative_audit.generation.client_base import BaseGenerationClient
from narrative_audit.generation.error_classification import (
    classify,
    describe,
    error_code,
    is_retryable,
)
from narrative_audit.generation.exceptions import GenerationError
from narrative_audit.generation.models import (
    GeneratedReport,
    GenerationFailure,
    GenerationResult,
    ModelResponse,
    TokenUsage,
)
from narrative_audit.generation.pricing import (
    DEFAULT_ESTIMATED_OUTPUT_TOKENS,
    DEFAULT_PRICE_TABLE,
    CostEstimate,
    PriceTable,
    compute_cost,
    estimate_cost,
)
from narrative_audit.generation.prompt_loader import (
    load_system_prompt,
    load_user_message_template,
)
from narrative_audit.logging.logger import Log

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAYS_SECONDS = (2.0, 5.0, 10.0)


class ReportGenerator:
    """Sends extracted text to the model service and prices the result.

    Rate limiting, overload and transient network errors are retried with a
    fixed increasing backoff; everything else fails on first occurrence.
    Service failures are returned as GenerationFailure, never raised.
    """

    def __init__(
        self,
        *,
        client: BaseGenerationClient,
        model: str,
        max_tokens: int = 16000,
        temperature: float = 1.0,
        prices: PriceTable = DEFAULT_PRICE_TABLE,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delays_seconds: Sequence[float] = DEFAULT_RETRY_DELAYS_SECONDS,
        sleep_fn: Callable[[float], None] = time.sleep,
        system_prompt_path: Path | None = None,
        user_message_path: Path | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._client = client
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._prices = prices
        self._max_attempts = max_attempts
        self._retry_delays = tuple(retry_delays_seconds)
        self._sleep = sleep_fn
        self._system_prompt = load_system_prompt(system_prompt_path)
        self._user_message_template = load_user_message_template(user_message_path)

    @property
    def prices(self) -> PriceTable:
        return self._prices

    def generate(
        self,
        extracted_text: str,
        *,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> GenerationResult:
        model = model or self._model
        user_message = self._build_user_message(extracted_text)

        retrying = Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=self._wait_strategy(),
            retry=retry_if_exception(is_retryable),
            sleep=self._sleep,
            before_sleep=self._log_retry,
            reraise=True,
        )
        attempt_number = 0
        try:
            for attempt in retrying:
                attempt_number = attempt.retry_state.attempt_number
                with attempt:
                    response = self._client.create_message(
                        model=model,
                        max_tokens=max_tokens if max_tokens is not None else self._max_tokens,
                        temperature=(
                            temperature if temperature is not None else self._temperature
                        ),
                        system_prompt=self._system_prompt,
                        user_message=user_message,
                    )
        except GenerationError as exc:
            return self._failure(exc, attempt_number)

        return self._build_report(response, model, attempt_number)

    def estimate(
        self,
        text_length: int,
        estimated_output_tokens: int = DEFAULT_ESTIMATED_OUTPUT_TOKENS,
    ) -> CostEstimate:
        return estimate_cost(text_length, estimated_output_tokens, self._prices)

    def _build_user_message(self, extracted_text: str) -> str:
        return self._user_message_template.replace("{extracted_text}", extracted_text)

    def _wait_strategy(self) -> wait_base:
        """Wait before attempt n+1 is retry_delays[n-1], clamped to the last entry."""
        if not self._retry_delays:
            return wait_none()
        return wait_chain(*[wait_fixed(delay) for delay in self._retry_delays])

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        Log.warning(
            f"Generation attempt {retry_state.attempt_number} failed, "
            f"retrying in {delay:g}s: {exc}",
            error_kind=classify(exc).value if isinstance(exc, Exception) else "unknown",
        )

    def _build_report(self, response: ModelResponse, model: str, attempt: int) -> GeneratedReport:
        usage = TokenUsage(input=response.input_tokens, output=response.output_tokens)
        cost = compute_cost(usage, self._prices)
        Log.info(
            f"Generation complete: {usage.total} tokens, ${cost.total:.4f}",
            model=model,
            attempts=attempt,
        )
        return GeneratedReport(
            report_text=response.text,
            tokens_used=usage,
            cost_usd=cost,
            model=model,
            attempts=attempt,
        )

    @staticmethod
    def _failure(exc: GenerationError, attempt: int) -> GenerationFailure:
        message = describe(exc)
        code = error_code(exc)
        Log.error(f"Generation failed after {attempt} attempt(s): {message}", error_code=code)
        return GenerationFailure(error_message=message, error_code=code, attempts=attempt)
