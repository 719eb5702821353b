"""Tests for the round resolver.

Coverage:
- Overpricing sells nothing
- Pricing at or below market sells everything at the asked price
- Costs depend only on quantity and fixed cost
- Scripted end-to-end rounds
- Precondition violations
"""

import math

import pytest

from simulation.core import calculate_costs, resolve_round
from simulation.scenarios import DEFAULT_FIXED_COST, DEFAULT_SCENARIOS, Scenario


MARKET_150 = Scenario(round_number=3, market_price=150, news_headline="", optimal_quantity=5000, optimal_profit=0)


class TestPriceTaking:

    @pytest.mark.parametrize("quantity", [0, 1, 5000, 10000])
    def test_overpricing_sells_nothing(self, quantity):
        record = resolve_round(MARKET_150, 150.01, quantity, DEFAULT_FIXED_COST)

        assert record.quantity_sold == 0
        assert record.revenue == 0

    @pytest.mark.parametrize("price", [0, 100, 149.99, 150])
    def test_at_or_below_market_sells_everything_at_own_price(self, price):
        record = resolve_round(MARKET_150, price, 4000, DEFAULT_FIXED_COST)

        assert record.quantity_sold == 4000
        assert record.revenue == pytest.approx(4000 * price)

    @pytest.mark.parametrize("price", [0, 120, 150, 200])
    def test_profit_is_revenue_minus_cost_and_cost_ignores_price(self, price):
        record = resolve_round(MARKET_150, price, 3000, DEFAULT_FIXED_COST)

        assert record.profit == pytest.approx(record.revenue - record.total_cost)
        assert record.total_cost == pytest.approx(calculate_costs(3000, DEFAULT_FIXED_COST).total_cost)

    def test_zero_quantity_loses_fixed_cost(self):
        record = resolve_round(MARKET_150, 150, 0, DEFAULT_FIXED_COST)

        assert record.total_cost == DEFAULT_FIXED_COST
        assert record.profit == -DEFAULT_FIXED_COST

    def test_record_carries_benchmark_and_fixed_cost(self):
        record = resolve_round(DEFAULT_SCENARIOS[3], 150, 5000, 500000)

        assert record.round_number == 4
        assert record.optimal_profit == -125000
        assert record.fixed_cost == 500000
        assert record.market_price == 150
        assert record.user_price == 150
        assert record.quantity_produced == 5000


class TestScriptedRounds:

    def test_round_1_at_optimum(self):
        record = resolve_round(DEFAULT_SCENARIOS[0], 180, 6000, DEFAULT_FIXED_COST)

        assert record.total_cost == pytest.approx(915000)
        assert record.revenue == pytest.approx(1080000)
        assert record.profit == pytest.approx(165000)
        assert record.profit == pytest.approx(record.optimal_profit)

    def test_round_4_fixed_cost_shock(self):
        scenario = DEFAULT_SCENARIOS[3]
        fixed_cost = scenario.effective_fixed_cost(DEFAULT_FIXED_COST)

        record = resolve_round(scenario, 150, 5000, fixed_cost)

        assert record.total_cost == pytest.approx(875000)
        assert record.revenue == pytest.approx(750000)
        assert record.profit == pytest.approx(-125000)

    def test_overpricing_round(self):
        record = resolve_round(MARKET_150, 160, 5000, DEFAULT_FIXED_COST)

        assert record.quantity_sold == 0
        assert record.revenue == 0
        assert record.profit == pytest.approx(-750000)

    def test_underpricing_round(self):
        record = resolve_round(MARKET_150, 140, 5000, DEFAULT_FIXED_COST)

        assert record.quantity_sold == 5000
        assert record.revenue == pytest.approx(700000)
        assert record.total_cost == pytest.approx(750000)
        assert record.profit == pytest.approx(-50000)


class TestPreconditions:

    @pytest.mark.parametrize("price", [-1, math.nan, math.inf])
    def test_invalid_price(self, price):
        with pytest.raises(ValueError):
            resolve_round(MARKET_150, price, 100, DEFAULT_FIXED_COST)

    @pytest.mark.parametrize("quantity", [-100, math.nan])
    def test_invalid_quantity(self, quantity):
        with pytest.raises(ValueError):
            resolve_round(MARKET_150, 150, quantity, DEFAULT_FIXED_COST)

    def test_invalid_fixed_cost(self):
        with pytest.raises(ValueError):
            resolve_round(MARKET_150, 150, 100, 0)
