"""Tests for the cost function and cost curve helpers."""

import math

import pytest

from simulation.core import (
    REFERENCE_QUANTITIES,
    calculate_costs,
    cost_reference_table,
    generate_cost_curve,
)


class TestCalculateCosts:

    @pytest.mark.parametrize("quantity", [0, 1, 100, 2500.5, 5000, 10000])
    @pytest.mark.parametrize("fixed_cost", [375000, 500000, 1])
    def test_total_and_marginal_cost_formulas(self, quantity, fixed_cost):
        costs = calculate_costs(quantity, fixed_cost)

        assert costs.variable_cost == pytest.approx(0.015 * quantity ** 2)
        assert costs.total_cost == pytest.approx(fixed_cost + 0.015 * quantity ** 2)
        assert costs.marginal_cost == pytest.approx(0.03 * quantity)

    def test_zero_quantity_has_zero_average_cost(self):
        costs = calculate_costs(0, 375000)

        assert costs.average_total_cost == 0
        assert costs.total_cost == 375000
        assert costs.marginal_cost == 0

    def test_average_total_cost_minimum_at_5000(self):
        """Standard factory: min ATC of 150 at 5,000 units."""
        at_min = calculate_costs(5000, 375000)

        assert at_min.average_total_cost == pytest.approx(150)
        assert calculate_costs(4900, 375000).average_total_cost > at_min.average_total_cost
        assert calculate_costs(5100, 375000).average_total_cost > at_min.average_total_cost

    def test_marginal_cost_follows_coefficient(self):
        """MC is always the derivative of VC, whatever the coefficient."""
        costs = calculate_costs(1000, 375000, coefficient=0.02)

        assert costs.variable_cost == pytest.approx(20000)
        assert costs.marginal_cost == pytest.approx(40)

    def test_fixed_cost_does_not_change_marginal_cost(self):
        normal = calculate_costs(5000, 375000)
        shock = calculate_costs(5000, 500000)

        assert shock.marginal_cost == normal.marginal_cost
        assert shock.total_cost - normal.total_cost == pytest.approx(125000)

    def test_same_inputs_same_result(self):
        assert calculate_costs(4321, 375000) == calculate_costs(4321, 375000)

    @pytest.mark.parametrize("quantity", [-1, math.nan, math.inf])
    def test_invalid_quantity_rejected(self, quantity):
        with pytest.raises(ValueError):
            calculate_costs(quantity, 375000)

    @pytest.mark.parametrize("fixed_cost", [0, -375000])
    def test_non_positive_fixed_cost_rejected(self, fixed_cost):
        with pytest.raises(ValueError):
            calculate_costs(100, fixed_cost)


class TestCostCurve:

    def test_default_curve_starts_at_500(self):
        curve = generate_cost_curve(375000)

        assert len(curve) == 96
        assert curve[0].quantity == 500
        assert curve[-1].quantity == 10000

    def test_curve_shifts_with_fixed_cost(self):
        normal = generate_cost_curve(375000)
        shock = generate_cost_curve(500000)

        for n, s in zip(normal, shock):
            assert s.marginal_cost == n.marginal_cost
            assert s.average_total_cost > n.average_total_cost

    def test_reference_table_rows(self):
        table = cost_reference_table(500000)

        assert [row.quantity for row in table] == list(REFERENCE_QUANTITIES)
        row_5000 = table[2]
        assert row_5000.total_cost == pytest.approx(875000)
        assert row_5000.average_total_cost == pytest.approx(175)
