from dataclasses import dataclass


@dataclass(frozen=True)
class ModelResponse:
    """Text and token usage returned by one model service call."""

    text: str
    input_tokens: int
    output_tokens: int


@dataclass(frozen=True)
class TokenUsage:
    input: int
    output: int

    @property
    def total(self) -> int:
        return self.input + self.output

    def to_dict(self) -> dict[str, int]:
        return {"input": self.input, "output": self.output, "total": self.total}


@dataclass(frozen=True)
class CostBreakdown:
    """Cost in USD split by input and output tokens."""

    input: float
    output: float

    @property
    def total(self) -> float:
        return self.input + self.output

    def to_dict(self) -> dict[str, float]:
        return {"input": self.input, "output": self.output, "total": self.total}


@dataclass(frozen=True)
class GeneratedReport:
    """Successful generation result."""

    report_text: str
    tokens_used: TokenUsage
    cost_usd: CostBreakdown
    model: str
    attempts: int = 1

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class GenerationFailure:
    """Final generation failure after retries, with a human-readable message."""

    error_message: str
    error_code: str
    attempts: int = 1

    @property
    def success(self) -> bool:
        return False


GenerationResult = GeneratedReport | GenerationFailure
