"""
Feedback classification for settled rounds and finished games.

Turns a RoundRecord into the pricing and marginal-analysis verdicts shown on
the result screen, and a final profit into the performance tier shown on the
end screen.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from simulation.core import RoundRecord, calculate_costs
from simulation.scenarios import DEFAULT_FIXED_COST, DEFAULT_VARIABLE_COST_COEFFICIENT


# Marginal cost within this distance of the selling price counts as "at the optimum"
# for the fixed cost shock lesson.
FIXED_COST_INSIGHT_TOLERANCE = 5.0


class PricingOutcome(str, Enum):
    OVERPRICED = "overpriced"
    UNDERPRICED = "underpriced"
    MATCHED = "matched"


class MarginalOutcome(str, Enum):
    NO_SALES = "no_sales"
    OVERPRODUCED = "overproduced"
    UNDERPRODUCED = "underproduced"
    OPTIMAL = "optimal"


@dataclass(frozen=True)
class RoundFeedback:
    """
    Pedagogical verdict on one settled round.

    Attributes:
        pricing_outcome: Price above, below or equal to the market price
        marginal_outcome: How the last unit compares with the selling price
        effective_selling_price: Price actually received per unit (0 if nothing sold)
        marginal_cost: MC of the last unit produced
        next_unit_marginal_cost: MC of one more unit
        average_total_cost: ATC at the quantity produced
        fixed_cost_shock: Round ran with a fixed cost above the default
        fixed_cost_insight: Loss came from fixed costs while the quantity decision was right
        title: Headline of the pricing verdict
        message: Explanation of the pricing verdict
        marginal_message: Explanation of the marginal verdict
    """
    pricing_outcome: PricingOutcome
    marginal_outcome: MarginalOutcome
    effective_selling_price: float
    marginal_cost: float
    next_unit_marginal_cost: float
    average_total_cost: float
    fixed_cost_shock: bool
    fixed_cost_insight: bool
    title: str
    message: str
    marginal_message: str


def _pricing_verdict(record: RoundRecord) -> Tuple[PricingOutcome, str, str]:
    if record.user_price > record.market_price:
        return (
            PricingOutcome.OVERPRICED,
            "Price too high!",
            f"You set your price at €{record.user_price:.2f}, but the market price was "
            f"€{record.market_price:.2f}. In a perfectly competitive market buyers found "
            f"identical solar panels cheaper elsewhere. You sold 0 units.",
        )
    if record.user_price < record.market_price:
        return (
            PricingOutcome.UNDERPRICED,
            "Money left on the table",
            f"You sold all {record.quantity_sold:,.0f} units right away! But you asked "
            f"€{record.user_price:.2f} while buyers were willing to pay "
            f"€{record.market_price:.2f}. The same work could have earned more revenue.",
        )
    return (
        PricingOutcome.MATCHED,
        "Market price matched",
        f"Excellent pricing. You sold all {record.quantity_sold:,.0f} units at the "
        f"market price of €{record.market_price:.2f}.",
    )


def classify_round(
    record: RoundRecord,
    default_fixed_cost: float = DEFAULT_FIXED_COST,
    coefficient: float = DEFAULT_VARIABLE_COST_COEFFICIENT,
) -> RoundFeedback:
    """
    Classifies a settled round for the result screen.

    Inputs:
        record: The settled RoundRecord.
        default_fixed_cost: Fixed cost of a normal round, to detect cost shocks.
        coefficient: k2 of the variable cost function.

    What happens:
        Compares the asked price with the market price (pricing verdict).
        Compares the marginal cost of the last unit and the next unit with
        the price actually received (marginal verdict). The received price is
        the player's own price when underpricing, which is their marginal revenue.
        Flags rounds where a fixed cost shock caused a loss even though the
        quantity sat at price = marginal cost.

    Output:
        Returns a RoundFeedback.

    Context:
        Called by the /game/submit endpoint and by the coaching commentary.
    """
    pricing_outcome, title, message = _pricing_verdict(record)

    if record.quantity_sold > 0:
        effective_price = min(record.user_price, record.market_price)
    else:
        effective_price = 0.0

    q = record.quantity_produced
    current = calculate_costs(q, record.fixed_cost, coefficient)
    next_unit_mc = calculate_costs(q + 1, record.fixed_cost, coefficient).marginal_cost
    mc = current.marginal_cost

    if record.quantity_sold == 0:
        marginal_outcome = MarginalOutcome.NO_SALES
        marginal_message = (
            "Since you sold nothing, your marginal analysis does not matter yet. "
            "Your priority must be to match the market price!"
        )
    elif mc > effective_price:
        marginal_outcome = MarginalOutcome.OVERPRODUCED
        marginal_message = (
            f"Warning: you produced {q:,.0f} units. The last unit cost you €{mc:.2f} "
            f"to make (MC), and you sold it for €{effective_price:.2f}. "
            f"That last unit lost money!"
        )
    elif next_unit_mc < effective_price:
        marginal_outcome = MarginalOutcome.UNDERPRODUCED
        marginal_message = (
            f"Opportunity: the next unit (#{q + 1:,.0f}) would only have cost "
            f"€{next_unit_mc:.2f}, and you received €{effective_price:.2f} per unit. "
            f"You should have produced more!"
        )
    else:
        marginal_outcome = MarginalOutcome.OPTIMAL
        marginal_message = (
            f"Perfect quantity! Your marginal cost (€{mc:.2f}) equals your selling "
            f"price (€{effective_price:.2f}). You maximized profit."
        )

    fixed_cost_shock = record.fixed_cost > default_fixed_cost
    fixed_cost_insight = (
        fixed_cost_shock
        and record.profit < 0
        and abs(mc - effective_price) < FIXED_COST_INSIGHT_TOLERANCE
    )
    if fixed_cost_insight:
        marginal_message += (
            " IMPORTANT: Although the high fixed costs left you with a loss, this was "
            "the best decision. Fixed costs do not affect marginal cost! Producing "
            "less would only have increased your loss."
        )

    return RoundFeedback(
        pricing_outcome=pricing_outcome,
        marginal_outcome=marginal_outcome,
        effective_selling_price=effective_price,
        marginal_cost=mc,
        next_unit_marginal_cost=next_unit_mc,
        average_total_cost=current.average_total_cost,
        fixed_cost_shock=fixed_cost_shock,
        fixed_cost_insight=fixed_cost_insight,
        title=title,
        message=message,
        marginal_message=marginal_message,
    )


# ================================
# End of Game
# ================================

@dataclass(frozen=True)
class PerformanceTier:
    key: str
    title: str
    message: str


# (minimum total profit, tier), checked top to bottom
PERFORMANCE_TIERS: List[Tuple[float, PerformanceTier]] = [
    (1000000, PerformanceTier(
        "perfect", "Perfect Competitor",
        "Incredible! You played optimally in every round.",
    )),
    (750000, PerformanceTier(
        "tycoon", "Industry Tycoon",
        "Outstanding work. You have mastered the concepts of perfect competition.",
    )),
    (250000, PerformanceTier(
        "established", "Established Manufacturer",
        "Good job. You stayed profitable, but there was room for improvement.",
    )),
    (0, PerformanceTier(
        "survivor", "Surviving Startup",
        "You survived, but only just. Remember: price = marginal cost!",
    )),
]

BANKRUPT_TIER = PerformanceTier(
    "bankrupt", "Bankrupt",
    "You lost money overall. Review the cost curves and try again!",
)


def classify_performance(total_profit: float) -> PerformanceTier:
    """
    Returns the end screen tier for a playthrough's total profit.
    """
    for threshold, tier in PERFORMANCE_TIERS:
        if total_profit >= threshold:
            return tier
    return BANKRUPT_TIER
