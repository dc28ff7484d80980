import pytest

from narrative_audit.generation.models import TokenUsage
from narrative_audit.generation.pricing import (
    DEFAULT_PRICE_TABLE,
    PriceTable,
    compute_cost,
    estimate_cost,
)


class TestComputeCost:
    def test_default_table_prices(self) -> None:
        assert DEFAULT_PRICE_TABLE == PriceTable(input_per_million=3.00, output_per_million=15.00)

    def test_reference_usage(self) -> None:
        cost = compute_cost(TokenUsage(input=12000, output=14000))
        assert cost.input == pytest.approx(0.036)
        assert cost.output == pytest.approx(0.21)
        assert cost.total == pytest.approx(0.246)

    def test_zero_usage_costs_nothing(self) -> None:
        assert compute_cost(TokenUsage(input=0, output=0)).total == 0

    def test_to_dict(self) -> None:
        usage = TokenUsage(input=1, output=2)
        assert usage.to_dict() == {"input": 1, "output": 2, "total": 3}


class TestEstimateCost:
    def test_four_characters_per_token_rounded_up(self) -> None:
        estimate = estimate_cost(10, estimated_output_tokens=0)
        assert estimate.estimated_input_tokens == 3

    def test_default_output_budget(self) -> None:
        estimate = estimate_cost(0)
        assert estimate.estimated_output_tokens == 16000
        assert estimate.estimated_cost_usd == pytest.approx(0.24)

    def test_matches_compute_cost_for_same_tokens(self) -> None:
        prices = PriceTable(input_per_million=5.0, output_per_million=25.0)
        estimate = estimate_cost(48000, estimated_output_tokens=14000, prices=prices)
        actual = compute_cost(TokenUsage(input=12000, output=14000), prices)
        assert estimate.estimated_cost_usd == pytest.approx(actual.total)
