"""
Scenario table and cost-model configuration for the perfect competition game.

This module contains:
- The Scenario data class (one scripted round of market conditions)
- The GameConfig data class (cost constants + the full scenario list)
- The built-in eight-round scenario table
- Configuration loading/reloading from config/game_config.json
"""

# Standard library imports
import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple


# ================================
# Cost Model Constants
# ================================

# Medium size factory: VC = 0.015 * q^2, so MC = 0.03 * q and min ATC sits at q = 5,000 (150 EUR).
DEFAULT_VARIABLE_COST_COEFFICIENT = 0.015   # k2
DEFAULT_FIXED_COST = 375000.0               # FC
DEFAULT_MAX_CAPACITY = 10000.0              # upper bound of the production slider

GAME_CONFIG_PATH = Path("config/game_config.json")


def require_positive(name: str, value: float) -> None:
    """
    Raises ValueError unless value is a finite number above zero.
    """
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be a positive number, got {value}")


# ================================
# Data Classes
# ================================

@dataclass(frozen=True)
class Scenario:
    """
    Market conditions for one scripted round.

    Attributes:
        round_number: Position of the round in the game (1-indexed)
        market_price: Prevailing price buyers pay for the commodity
        news_headline: Narrative text shown to the player for this round
        optimal_quantity: Profit maximizing quantity (price = marginal cost)
        optimal_profit: Profit at optimal_quantity, used only for end-of-game benchmarking
        fixed_cost_override: Fixed cost for this round only (None = use the default)
    """
    round_number: int
    market_price: float
    news_headline: str
    optimal_quantity: float
    optimal_profit: float
    fixed_cost_override: float | None = None

    def effective_fixed_cost(self, default_fixed_cost: float) -> float:
        """
        Returns the fixed cost that applies to this round.
        """
        if self.fixed_cost_override is not None:
            return self.fixed_cost_override
        return default_fixed_cost


# ================================
# Default Scenario Table
# ================================

DEFAULT_SCENARIOS: Tuple[Scenario, ...] = (
    Scenario(
        round_number=1,
        market_price=180,
        news_headline="Strong demand! Countries are pushing their renewable energy targets forward.",
        optimal_quantity=6000,
        optimal_profit=165000,
    ),
    Scenario(
        round_number=2,
        market_price=165,
        news_headline="The first new competitors enter the market, attracted by the high profits.",
        optimal_quantity=5500,
        optimal_profit=78750,
    ),
    Scenario(
        round_number=3,
        market_price=150,
        news_headline="Market equilibrium reached. Prices now equal the minimum average cost.",
        optimal_quantity=5000,
        optimal_profit=0,
    ),
    # Rent shock: fixed cost rises, marginal cost does not, so the optimal quantity stays put.
    Scenario(
        round_number=4,
        market_price=150,
        news_headline="BAD NEWS: Industrial rents have doubled! Your fixed costs rise sharply.",
        optimal_quantity=5000,
        optimal_profit=-125000,
        fixed_cost_override=500000,
    ),
    # Rent shock is over, back to the default fixed cost.
    Scenario(
        round_number=5,
        market_price=210,
        news_headline="BREAKING: Massive government subsidies trigger a demand boom!",
        optimal_quantity=7000,
        optimal_profit=360000,
    ),
    Scenario(
        round_number=6,
        market_price=135,
        news_headline="Recession! Demand collapses and the market is oversupplied.",
        optimal_quantity=4500,
        optimal_profit=-71250,
    ),
    Scenario(
        round_number=7,
        market_price=150,
        news_headline="The market slowly recovers and returns to its long-run average.",
        optimal_quantity=5000,
        optimal_profit=0,
    ),
    Scenario(
        round_number=8,
        market_price=165,
        news_headline="A major competitor goes bankrupt and prices rise slightly.",
        optimal_quantity=5500,
        optimal_profit=78750,
    ),
)


@dataclass(frozen=True)
class GameConfig:
    """
    Immutable game configuration shared by every session.

    Attributes:
        variable_cost_coefficient: k2 in VC = k2 * q^2 (marginal cost is always 2 * k2 * q)
        default_fixed_cost: Fixed cost for rounds without an override
        max_capacity: Largest quantity a player may produce in one round
        scenarios: Ordered scenario list, round numbers exactly 1..N
    """
    variable_cost_coefficient: float = DEFAULT_VARIABLE_COST_COEFFICIENT
    default_fixed_cost: float = DEFAULT_FIXED_COST
    max_capacity: float = DEFAULT_MAX_CAPACITY
    scenarios: Tuple[Scenario, ...] = DEFAULT_SCENARIOS

    def __post_init__(self) -> None:
        require_positive("variable_cost_coefficient", self.variable_cost_coefficient)
        require_positive("default_fixed_cost", self.default_fixed_cost)
        require_positive("max_capacity", self.max_capacity)
        if not self.scenarios:
            raise ValueError("At least one scenario is required")

        # Round numbers must run 1..N in order with no gaps
        for expected, scenario in enumerate(self.scenarios, start=1):
            if scenario.round_number != expected:
                raise ValueError(
                    f"Scenario round numbers must be 1..{len(self.scenarios)} in order "
                    f"(found {scenario.round_number} at position {expected})"
                )
            require_positive(f"Round {expected}: market_price", scenario.market_price)
            if scenario.fixed_cost_override is not None:
                require_positive(f"Round {expected}: fixed_cost_override", scenario.fixed_cost_override)

    @property
    def total_rounds(self) -> int:
        return len(self.scenarios)

    @property
    def max_total_profit(self) -> float:
        """Sum of every round's optimal profit (the best achievable score)."""
        return sum(s.optimal_profit for s in self.scenarios)


# ================================
# Benchmarking
# ================================

def compute_benchmark(
    market_price: float,
    fixed_cost: float,
    coefficient: float = DEFAULT_VARIABLE_COST_COEFFICIENT,
) -> Tuple[float, float]:
    """
    Computes the profit maximizing quantity and profit for a price-taking firm.

    Inputs:
        market_price: Price the firm receives per unit.
        fixed_cost: Fixed cost for the round.
        coefficient: k2 of the variable cost function.

    What happens:
        Solves price = marginal cost (price = 2 * k2 * q) for q.
        Plugs q back into profit = p * q - FC - k2 * q^2.

    Output:
        Returns a tuple of (optimal_quantity, optimal_profit).

    Context:
        Used to fill optimal values for scenarios loaded from JSON that leave them out.
        Never used to constrain player input.
    """
    quantity = market_price / (2 * coefficient)
    profit = market_price * quantity - fixed_cost - coefficient * quantity ** 2
    return quantity, profit


# ================================
# Configuration Loading
# ================================

def scenario_from_dict(
    data: Dict[str, Any],
    default_fixed_cost: float,
    coefficient: float,
) -> Scenario:
    """
    Builds a Scenario from a JSON dictionary, deriving missing optimal values.
    """
    override = data.get("fixed_cost_override")
    market_price = float(data["market_price"])
    fixed_cost = float(override) if override is not None else default_fixed_cost
    optimal_quantity, optimal_profit = compute_benchmark(market_price, fixed_cost, coefficient)

    return Scenario(
        round_number=int(data["round_number"]),
        market_price=market_price,
        news_headline=str(data.get("news_headline", "")),
        optimal_quantity=float(data.get("optimal_quantity", optimal_quantity)),
        optimal_profit=float(data.get("optimal_profit", optimal_profit)),
        fixed_cost_override=float(override) if override is not None else None,
    )


def game_config_from_dict(data: Dict[str, Any]) -> GameConfig:
    """
    Builds a GameConfig from a parsed JSON dictionary.

    Inputs:
        data: Dictionary with any of variable_cost_coefficient, default_fixed_cost,
              max_capacity and scenarios (list of scenario dictionaries).

    What happens:
        Uses the built-in default for every missing top level key.
        Converts each scenario dictionary, computing optimal quantity/profit
        when the dictionary leaves them out.
        GameConfig validates the result (positive constants, rounds 1..N).

    Output:
        Returns a validated GameConfig.

    Context:
        Used by load_game_config() and by the /config/update endpoint.
        Raises ValueError, KeyError or TypeError on invalid data.
    """
    coefficient = float(data.get("variable_cost_coefficient", DEFAULT_VARIABLE_COST_COEFFICIENT))
    default_fixed_cost = float(data.get("default_fixed_cost", DEFAULT_FIXED_COST))
    max_capacity = float(data.get("max_capacity", DEFAULT_MAX_CAPACITY))

    # Benchmarks divide by the coefficient, so check the constants before any scenario is built
    require_positive("variable_cost_coefficient", coefficient)
    require_positive("default_fixed_cost", default_fixed_cost)
    require_positive("max_capacity", max_capacity)

    raw_scenarios = data.get("scenarios")
    if raw_scenarios is None:
        scenarios = DEFAULT_SCENARIOS
    else:
        scenarios = tuple(
            scenario_from_dict(item, default_fixed_cost, coefficient)
            for item in raw_scenarios
        )

    return GameConfig(
        variable_cost_coefficient=coefficient,
        default_fixed_cost=default_fixed_cost,
        max_capacity=max_capacity,
        scenarios=scenarios,
    )


def game_config_to_dict(config: GameConfig) -> Dict[str, Any]:
    """
    Converts a GameConfig back to the JSON layout read by load_game_config().
    """
    scenarios: List[Dict[str, Any]] = []
    for s in config.scenarios:
        item: Dict[str, Any] = {
            "round_number": s.round_number,
            "market_price": s.market_price,
            "news_headline": s.news_headline,
            "optimal_quantity": s.optimal_quantity,
            "optimal_profit": s.optimal_profit,
        }
        if s.fixed_cost_override is not None:
            item["fixed_cost_override"] = s.fixed_cost_override
        scenarios.append(item)

    return {
        "variable_cost_coefficient": config.variable_cost_coefficient,
        "default_fixed_cost": config.default_fixed_cost,
        "max_capacity": config.max_capacity,
        "scenarios": scenarios,
    }


def load_game_config(path: Path) -> GameConfig:
    """
    Loads the game configuration from a JSON file.

    Inputs:
        path: Path object pointing to the JSON configuration file.

    What happens:
        Attempts to read and parse the JSON file.
        If the file is missing, returns the built-in configuration.
        If the file exists but cannot be parsed or fails validation,
        reports the problem and returns the built-in configuration.

    Output:
        Returns a GameConfig object with loaded or default values.

    Context:
        Called during module initialization to load DEFAULT_CONFIG.
        Called by reload_defaults() after the instructor updates configuration.
    """
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        return GameConfig()
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error reading game config {path}: {e}")
        return GameConfig()

    try:
        return game_config_from_dict(data)
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        print(f"Invalid game config {path}, using defaults: {e}")
        return GameConfig()


def reload_defaults() -> GameConfig:
    """
    Reloads the configuration file and replaces the shared config object.

    Sessions created earlier keep the GameConfig they were given.
    """
    global DEFAULT_CONFIG
    DEFAULT_CONFIG = load_game_config(GAME_CONFIG_PATH)
    return DEFAULT_CONFIG


def get_current_config() -> GameConfig:
    """
    Gets the configuration new sessions are created with.
    """
    return DEFAULT_CONFIG


# Load default configuration on module import
DEFAULT_CONFIG: GameConfig = load_game_config(GAME_CONFIG_PATH)
