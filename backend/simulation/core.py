"""
Core simulation logic for the perfect competition game.

This module contains:
- The cost function (total, marginal, average total and variable cost)
- Cost curve generation for charts and the reference table
- The round resolver that settles one round of play
- The game session state machine (intro -> playing -> result -> end)
"""

# Standard library imports
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from simulation.scenarios import (
    DEFAULT_VARIABLE_COST_COEFFICIENT,
    GameConfig,
    Scenario,
    get_current_config,
)


# ================================
# Cost Function
# ================================

@dataclass(frozen=True)
class CostSnapshot:
    """
    Cost figures of the factory at one production quantity.

    Attributes:
        quantity: Units produced (q)
        total_cost: FC + VC (TC)
        marginal_cost: Cost of the next unit, 2 * k2 * q (MC)
        average_total_cost: TC / q, defined as 0 at q = 0 (ATC)
        variable_cost: k2 * q^2 (VC)
    """
    quantity: float
    total_cost: float
    marginal_cost: float
    average_total_cost: float
    variable_cost: float


def calculate_costs(
    quantity: float,
    fixed_cost: float,
    coefficient: float = DEFAULT_VARIABLE_COST_COEFFICIENT,
) -> CostSnapshot:
    """
    Calculates the factory's cost figures at a given quantity.

    Inputs:
        quantity: Units produced, must be >= 0.
        fixed_cost: Fixed cost for the round, must be > 0.
        coefficient: k2 of the variable cost function VC = k2 * q^2.

    What happens:
        VC = k2 * q^2, TC = FC + VC.
        MC is the exact derivative of VC (2 * k2 * q), so the two always agree.
        ATC = TC / q, or 0 when nothing is produced.

    Output:
        Returns a CostSnapshot.

    Context:
        Used by the round resolver, the cost preview shown before submission,
        the cost curve chart and the feedback classifier.
    """
    if quantity < 0 or not math.isfinite(quantity):
        raise ValueError(f"quantity must be a non-negative number, got {quantity}")
    if fixed_cost <= 0 or not math.isfinite(fixed_cost):
        raise ValueError(f"fixed_cost must be a positive number, got {fixed_cost}")

    variable_cost = coefficient * quantity ** 2
    total_cost = fixed_cost + variable_cost
    marginal_cost = 2 * coefficient * quantity
    average_total_cost = total_cost / quantity if quantity > 0 else 0.0

    return CostSnapshot(
        quantity=quantity,
        total_cost=total_cost,
        marginal_cost=marginal_cost,
        average_total_cost=average_total_cost,
        variable_cost=variable_cost,
    )


def generate_cost_curve(
    fixed_cost: float,
    coefficient: float = DEFAULT_VARIABLE_COST_COEFFICIENT,
    max_quantity: float = 10000,
    step: float = 100,
    min_quantity: float = 500,
) -> List[CostSnapshot]:
    """
    Generates MC/ATC chart data for one fixed cost level.

    Quantities run from 0 to max_quantity in steps of `step`; points below
    min_quantity are dropped because ATC explodes near zero.
    """
    points = int(max_quantity // step) + 1
    curve = [calculate_costs(i * step, fixed_cost, coefficient) for i in range(points)]
    return [c for c in curve if c.quantity >= min_quantity]


REFERENCE_QUANTITIES: Tuple[int, ...] = (1000, 3000, 5000, 7000, 9000)


def cost_reference_table(
    fixed_cost: float,
    coefficient: float = DEFAULT_VARIABLE_COST_COEFFICIENT,
) -> List[CostSnapshot]:
    """
    Returns the cost rows shown in the reference table on the playing screen.
    """
    return [calculate_costs(q, fixed_cost, coefficient) for q in REFERENCE_QUANTITIES]


# ================================
# Round Resolver
# ================================

@dataclass(frozen=True)
class RoundRecord:
    """
    Settled outcome of one round.

    Attributes:
        round_number: Round this record belongs to (1-indexed)
        market_price: Market price of the round
        user_price: Price the player asked
        quantity_produced: Units the player produced
        quantity_sold: Units sold (all or nothing)
        revenue: quantity_sold * price received
        total_cost: Cost of everything produced
        profit: revenue - total_cost
        optimal_profit: Scripted best profit for this round
        fixed_cost: Fixed cost actually used in the cost calculation
    """
    round_number: int
    market_price: float
    user_price: float
    quantity_produced: float
    quantity_sold: float
    revenue: float
    total_cost: float
    profit: float
    optimal_profit: float
    fixed_cost: float


def resolve_round(
    scenario: Scenario,
    user_price: float,
    quantity_produced: float,
    active_fixed_cost: float,
    coefficient: float = DEFAULT_VARIABLE_COST_COEFFICIENT,
) -> RoundRecord:
    """
    Settles one round of the game for a price-taking firm.

    Inputs:
        scenario: Scenario of the round (market price and optimal profit).
        user_price: Price the player asks per unit, must be >= 0.
        quantity_produced: Units the player produced, must be >= 0.
        active_fixed_cost: Fixed cost in force for this round.
        coefficient: k2 of the variable cost function.

    What happens:
        If the player asks more than the market price, buyers go elsewhere and nothing sells.
        Otherwise everything produced sells, at the player's own price. Asking less
        than the market price is honored literally and leaves money on the table.
        Costs are incurred on every unit produced, sold or not.
        Profit = revenue - total cost.

    Output:
        Returns a RoundRecord with all inputs and outputs of the round.

    Context:
        Called by GameSession.submit() once per round.
        Pure function: no state is read or written.
    """
    if user_price < 0 or not math.isfinite(user_price):
        raise ValueError(f"user_price must be a non-negative number, got {user_price}")
    if quantity_produced < 0 or not math.isfinite(quantity_produced):
        raise ValueError(f"quantity_produced must be a non-negative number, got {quantity_produced}")

    market_price = scenario.market_price

    # Strict price taking: above market sells nothing, at or below market sells everything
    if user_price > market_price:
        quantity_sold = 0.0
    else:
        quantity_sold = quantity_produced

    active_price = user_price if user_price <= market_price else 0.0
    revenue = quantity_sold * active_price

    costs = calculate_costs(quantity_produced, active_fixed_cost, coefficient)
    profit = revenue - costs.total_cost

    return RoundRecord(
        round_number=scenario.round_number,
        market_price=market_price,
        user_price=user_price,
        quantity_produced=quantity_produced,
        quantity_sold=quantity_sold,
        revenue=revenue,
        total_cost=costs.total_cost,
        profit=profit,
        optimal_profit=scenario.optimal_profit,
        fixed_cost=active_fixed_cost,
    )


# ================================
# Game Session
# ================================

class GamePhase(str, Enum):
    INTRO = "intro"
    PLAYING = "playing"
    RESULT = "result"
    END = "end"


class PhaseError(ValueError):
    """Raised when a session action is not allowed in the current phase."""


class InvalidSubmissionError(ValueError):
    """Raised when a submitted price or quantity is out of range."""


@dataclass
class GameSession:
    """
    State of one playthrough.

    Attributes:
        config: Immutable game configuration the session was created with
        phase: Current phase of the game
        round_index: Index of the current scenario (0-based)
        history: Settled round records, oldest first

    Only start(), submit(), advance() and restart() change the state.
    """
    config: GameConfig = field(default_factory=get_current_config)
    phase: GamePhase = GamePhase.INTRO
    round_index: int = 0
    history: List[RoundRecord] = field(default_factory=list)

    @property
    def current_scenario(self) -> Scenario:
        return self.config.scenarios[self.round_index]

    @property
    def active_fixed_cost(self) -> float:
        return self.current_scenario.effective_fixed_cost(self.config.default_fixed_cost)

    @property
    def is_fixed_cost_shock(self) -> bool:
        return self.active_fixed_cost > self.config.default_fixed_cost

    @property
    def is_last_round(self) -> bool:
        return self.round_index == self.config.total_rounds - 1

    @property
    def cumulative_profit(self) -> float:
        """Sum of profits over the history, recomputed on every access."""
        return sum(record.profit for record in self.history)

    @property
    def last_record(self) -> RoundRecord | None:
        return self.history[-1] if self.history else None

    def _require_phase(self, expected: GamePhase, action: str) -> None:
        if self.phase != expected:
            raise PhaseError(
                f"Cannot {action} while the game is in phase '{self.phase.value}'."
            )

    def preview(self, quantity: float) -> CostSnapshot:
        """
        Cost snapshot for a candidate quantity at the current round's fixed cost.
        """
        self._check_quantity(quantity)
        return calculate_costs(quantity, self.active_fixed_cost, self.config.variable_cost_coefficient)

    def _check_quantity(self, quantity: float) -> None:
        if not math.isfinite(quantity) or quantity < 0 or quantity > self.config.max_capacity:
            raise InvalidSubmissionError(
                f"Quantity must be between 0 and {self.config.max_capacity:g} units."
            )

    def start(self) -> None:
        """
        Leaves the intro screen and opens the first round.
        """
        self._require_phase(GamePhase.INTRO, "start the game")
        self.phase = GamePhase.PLAYING

    def submit(self, price: float, quantity: float) -> RoundRecord:
        """
        Submits the player's price and quantity for the current round.

        Inputs:
            price: Asking price per unit (finite, >= 0).
            quantity: Units to produce (finite, between 0 and max capacity).

        What happens:
            Validates the input.
            Resolves the current scenario with its effective fixed cost.
            Appends the settled record to the history.
            Moves the game to the result phase.

        Output:
            Returns the settled RoundRecord.

        Context:
            Called by the /game/submit endpoint. Only allowed while playing.
        """
        self._require_phase(GamePhase.PLAYING, "submit a round")
        if not math.isfinite(price) or price < 0:
            raise InvalidSubmissionError("Price must be a non-negative number.")
        self._check_quantity(quantity)

        record = resolve_round(
            self.current_scenario,
            user_price=price,
            quantity_produced=quantity,
            active_fixed_cost=self.active_fixed_cost,
            coefficient=self.config.variable_cost_coefficient,
        )
        self.history.append(record)
        self.phase = GamePhase.RESULT
        return record

    def advance(self) -> None:
        """
        Moves on from the result screen: next round, or the end screen after the last one.
        """
        self._require_phase(GamePhase.RESULT, "advance")
        if self.round_index < self.config.total_rounds - 1:
            self.round_index += 1
            self.phase = GamePhase.PLAYING
        else:
            self.phase = GamePhase.END

    def restart(self) -> None:
        """
        Clears the history and returns to the intro screen. Allowed in any phase.
        """
        self.history = []
        self.round_index = 0
        self.phase = GamePhase.INTRO


# ================================
# Testing / Development
# ================================

if __name__ == "__main__":
    """
    Standalone run that plays every round at the optimal decision.
    """
    session = GameSession()
    session.start()

    print("Starting standalone game simulation...\n")

    while True:
        scenario = session.current_scenario
        record = session.submit(scenario.market_price, scenario.optimal_quantity)
        print(f"Round {record.round_number}: profit {record.profit:,.0f} (optimal {record.optimal_profit:,.0f})")
        session.advance()
        if session.phase == GamePhase.END:
            break

    print("\nFinal profit:", session.cumulative_profit)
    print("Max possible:", session.config.max_total_profit)
