import math
from dataclasses import dataclass

from narrative_audit.generation.models import CostBreakdown, TokenUsage

TOKENS_PER_MILLION = 1_000_000
CHARS_PER_TOKEN_ESTIMATE = 4
DEFAULT_ESTIMATED_OUTPUT_TOKENS = 16000


@dataclass(frozen=True)
class PriceTable:
    """USD price per one million input/output tokens."""

    input_per_million: float = 3.00
    output_per_million: float = 15.00


DEFAULT_PRICE_TABLE = PriceTable()


def compute_cost(usage: TokenUsage, prices: PriceTable = DEFAULT_PRICE_TABLE) -> CostBreakdown:
    return CostBreakdown(
        input=usage.input / TOKENS_PER_MILLION * prices.input_per_million,
        output=usage.output / TOKENS_PER_MILLION * prices.output_per_million,
    )


@dataclass(frozen=True)
class CostEstimate:
    estimated_input_tokens: int
    estimated_output_tokens: int
    estimated_cost_usd: float


def estimate_cost(
    text_length: int,
    estimated_output_tokens: int = DEFAULT_ESTIMATED_OUTPUT_TOKENS,
    prices: PriceTable = DEFAULT_PRICE_TABLE,
) -> CostEstimate:
    """Pre-flight estimate from the input length, using the same price table."""
    input_tokens = math.ceil(text_length / CHARS_PER_TOKEN_ESTIMATE)
    cost = compute_cost(TokenUsage(input=input_tokens, output=estimated_output_tokens), prices)
    return CostEstimate(
        estimated_input_tokens=input_tokens,
        estimated_output_tokens=estimated_output_tokens,
        estimated_cost_usd=cost.total,
    )
