"""
Pydantic models that define the shapes of data we send to / receive from the frontend.

These schemas are used for:
- API request/response validation
- Type checking and serialization
- Documentation generation (FastAPI automatically generates OpenAPI docs from these)

All models inherit from Pydantic's BaseModel, which provides automatic validation,
JSON serialization, and type checking.
"""

from pydantic import BaseModel, Field
from typing import List


# ============================================================================
# Configuration Schemas
# ============================================================================

class CostModelData(BaseModel):
    """
    Cost model constants of the factory.

    Fields:
        variable_cost_coefficient: k2 in VC = k2 * q^2 (MC = 2 * k2 * q)
        default_fixed_cost: Fixed cost of a round without an override
        max_capacity: Largest quantity a player may produce per round

    Usage:
        - Used in `/config/current` endpoint response
        - Used in `/config/update` endpoint request
        - Converted from GameConfig (scenarios.py) for API responses
    """
    variable_cost_coefficient: float
    default_fixed_cost: float
    max_capacity: float


class ScenarioData(BaseModel):
    """
    One scripted round of market conditions (API representation of Scenario).

    Fields:
        round_number: Round position (1-indexed)
        market_price: Prevailing market price
        news_headline: Narrative shown on the playing screen
        optimal_quantity: Quantity where price = marginal cost
        optimal_profit: Profit at the optimal quantity (benchmark only)
        fixed_cost_override: Fixed cost for this round only, None = default

    Usage:
        - Part of GameStateResponse (current scenario)
        - Part of ConfigStateResponse (full table)
        - Accepted by `/config/update`; optimal values may be omitted and are then derived
    """
    round_number: int
    market_price: float
    news_headline: str = ""
    optimal_quantity: float | None = None
    optimal_profit: float | None = None
    fixed_cost_override: float | None = None


class ConfigStateResponse(BaseModel):
    """
    Complete configuration state returned to frontend.

    Fields:
        cost_model: Current cost constants
        scenarios: Full scenario table in round order
        max_total_profit: Sum of every round's optimal profit

    Usage:
        - Returned by `/config/current` endpoint (GET)
        - Returned by `/config/update` endpoint (POST) after updating
    """
    cost_model: CostModelData
    scenarios: List[ScenarioData]
    max_total_profit: float


class UpdateConfigRequest(BaseModel):
    """
    Request to update configuration.

    Fields:
        cost_model: New cost constants (optional - only updates if provided)
        scenarios: New scenario table (optional - only updates if provided)

    Context:
        Allows partial updates - only provided fields are updated.
        Updates are saved to config/game_config.json and reloaded into memory.
        Sessions already running keep their configuration.
    """
    cost_model: CostModelData | None = None
    scenarios: List[ScenarioData] | None = None


class CostSnapshotData(BaseModel):
    """
    Cost figures at one quantity (API representation of CostSnapshot).
    """
    quantity: float
    total_cost: float
    marginal_cost: float
    average_total_cost: float
    variable_cost: float


class CostCurveResponse(BaseModel):
    """
    Chart data for the MC / ATC curves at one fixed cost level.

    Fields:
        fixed_cost: Fixed cost the curve was computed with
        points: Cost snapshots from 500 to 10,000 units in steps of 100
        reference_table: Cost rows at 1,000 / 3,000 / 5,000 / 7,000 / 9,000 units
    """
    fixed_cost: float
    points: List[CostSnapshotData]
    reference_table: List[CostSnapshotData]


# ============================================================================
# Round Schemas
# ============================================================================

class RoundRecordData(BaseModel):
    """
    Settled outcome of one round (API representation of RoundRecord).

    Usage:
        - Returned by `/game/submit` (the round just played)
        - Part of GameStateResponse.history and GameSummary.rounds
        - `profit` vs `optimal_profit` feeds the end screen comparison chart
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


class RoundFeedbackData(BaseModel):
    """
    Pedagogical verdict on one round (API representation of RoundFeedback).

    Fields:
        pricing_outcome: "overpriced", "underpriced" or "matched"
        marginal_outcome: "no_sales", "overproduced", "underproduced" or "optimal"
        effective_selling_price: Price actually received per unit
        marginal_cost: MC of the last unit produced
        next_unit_marginal_cost: MC of one more unit
        average_total_cost: ATC at the quantity produced
        fixed_cost_shock: Round had a raised fixed cost
        fixed_cost_insight: Loss was caused by fixed costs, quantity was right
        title, message: Pricing headline and explanation
        marginal_message: Economist's insight on the quantity decision
    """
    pricing_outcome: str
    marginal_outcome: str
    effective_selling_price: float
    marginal_cost: float
    next_unit_marginal_cost: float
    average_total_cost: float
    fixed_cost_shock: bool
    fixed_cost_insight: bool
    title: str
    message: str
    marginal_message: str


# ============================================================================
# Game Flow Request/Response Schemas
# ============================================================================

class GameStateResponse(BaseModel):
    """
    Current game state information returned to frontend.

    Fields:
        session_id: Unique identifier for this game session
        phase: "intro", "playing", "result" or "end"
        round_index: Index of the current scenario (0-based)
        round_number: Current round number (1-indexed)
        total_rounds: Number of scenarios in this game
        is_last_round: Whether the current round is the final one
        scenario: Market conditions of the current round
        active_fixed_cost: Fixed cost in force this round
        fixed_cost_shock: Whether the active fixed cost is above the default
        max_capacity: Upper bound for the production quantity
        cumulative_profit: Sum of profits so far
        history: All settled rounds, oldest first

    Usage:
        - Returned by every `/game/*` endpoint that changes or reads state
        - Frontend picks the screen to render from `phase`
    """
    session_id: str
    phase: str
    round_index: int
    round_number: int
    total_rounds: int
    is_last_round: bool
    scenario: ScenarioData
    active_fixed_cost: float
    fixed_cost_shock: bool
    max_capacity: float
    cumulative_profit: float
    history: List[RoundRecordData] = Field(default_factory=list)


class GameStateRequest(BaseModel):
    """
    Request that only needs a session id.

    Usage:
        - `/game/start`, `/game/state`, `/game/advance`, `/game/restart`, `/game/coach`
    """
    session_id: str


class PreviewRequest(BaseModel):
    """
    Request for the projected costs of a candidate quantity.

    Fields:
        session_id: Unique identifier for the game session
        quantity: Quantity currently selected on the slider
    """
    session_id: str
    quantity: float


class PreviewResponse(BaseModel):
    """
    Projected costs for the current round, before submitting.

    Fields:
        costs: Cost snapshot at the chosen quantity and this round's fixed cost
        fixed_cost_shock: Whether this round runs with a raised fixed cost
    """
    costs: CostSnapshotData
    fixed_cost_shock: bool


class SubmitRoundRequest(BaseModel):
    """
    Player decision for the current round.

    Fields:
        session_id: Unique identifier for the game session
        price: Asking price per unit (>= 0)
        quantity: Units to produce (0 to max capacity)
    """
    session_id: str
    price: float
    quantity: float


class SubmitRoundResponse(BaseModel):
    """
    Response after submitting a round.

    Fields:
        state: Updated game state (phase is now "result")
        record: The settled round
        feedback: Pricing and marginal verdicts for the result screen
    """
    state: GameStateResponse
    record: RoundRecordData
    feedback: RoundFeedbackData


class GameSummary(BaseModel):
    """
    End-of-game summary.

    Fields:
        session_id: Unique identifier for this game session
        total_rounds_played: Number of settled rounds
        total_profit: Sum of profits over all rounds
        max_total_profit: Sum of the optimal profits (best achievable)
        tier: Performance tier key ("perfect", "tycoon", "established", "survivor", "bankrupt")
        tier_title: Display title of the tier
        tier_message: Closing message of the tier
        rounds: All settled rounds, for the profit vs optimal chart

    Usage:
        - Returned by `/game/summary` endpoint (GET), only once the game has ended
    """
    session_id: str
    total_rounds_played: int
    total_profit: float
    max_total_profit: float
    tier: str
    tier_title: str
    tier_message: str
    rounds: List[RoundRecordData] = Field(default_factory=list)


class CoachResponse(BaseModel):
    """
    Coaching commentary on the most recent round.

    Fields:
        round_number: Round the commentary refers to
        message: Plain text commentary
        source: "ai" when a model produced it, "fallback" for the built-in feedback
    """
    round_number: int
    message: str
    source: str
