from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from narrative_audit.logging.logger import Log

T = TypeVar("T")


@dataclass(frozen=True)
class SideEffectResult(Generic[T]):
    """Outcome of best-effort work that must never fail the pipeline."""

    effect: str
    ok: bool
    value: T | None = None
    error: str | None = None


def run_non_fatal(effect: str, fn: Callable[[], T], **context: object) -> SideEffectResult[T]:
    """Run fn, logging and returning any exception instead of raising it."""
    try:
        value = fn()
    except Exception as exc:
        Log.error(f"Non-fatal step '{effect}' failed: {exc}", **context)
        return SideEffectResult(effect=effect, ok=False, error=str(exc))
    return SideEffectResult(effect=effect, ok=True, value=value)
