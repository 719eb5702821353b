"""
Game service functions for converting data structures and checking game state.
"""

from simulation.core import CostSnapshot, GamePhase, GameSession, RoundRecord
from simulation.feedback import RoundFeedback, classify_performance
from simulation.scenarios import GameConfig, Scenario, get_current_config
from app.schemas import (
    ConfigStateResponse,
    CostModelData,
    CostSnapshotData,
    GameStateResponse,
    GameSummary,
    RoundFeedbackData,
    RoundRecordData,
    ScenarioData,
)


def is_game_over(session: GameSession) -> bool:
    """
    Checks if the game has ended.

    Inputs:
        session: The current game session.

    What happens:
        Checks whether the session reached the end phase, which only happens
        after the last scenario has been settled and the player advanced.

    Output:
        Returns True if the game is over, False otherwise.

    Context:
        Used by the summary endpoint, which is only available after the game ends.
    """
    return session.phase == GamePhase.END


def to_scenario_data(scenario: Scenario) -> ScenarioData:
    """
    Converts a Scenario object to ScenarioData schema for API responses.
    """
    return ScenarioData(
        round_number=scenario.round_number,
        market_price=scenario.market_price,
        news_headline=scenario.news_headline,
        optimal_quantity=scenario.optimal_quantity,
        optimal_profit=scenario.optimal_profit,
        fixed_cost_override=scenario.fixed_cost_override,
    )


def to_cost_snapshot_data(costs: CostSnapshot) -> CostSnapshotData:
    """
    Converts a CostSnapshot object to CostSnapshotData schema for API responses.
    """
    return CostSnapshotData(
        quantity=costs.quantity,
        total_cost=costs.total_cost,
        marginal_cost=costs.marginal_cost,
        average_total_cost=costs.average_total_cost,
        variable_cost=costs.variable_cost,
    )


def to_round_record_data(record: RoundRecord) -> RoundRecordData:
    """
    Converts a RoundRecord object to RoundRecordData schema for API responses.

    Inputs:
        record: A settled RoundRecord from the simulation core.

    What happens:
        Copies every field of the record into the API schema.

    Output:
        Returns a RoundRecordData object that can be serialized to JSON.

    Context:
        Used for the round returned by /game/submit and for every entry of the history.
    """
    return RoundRecordData(
        round_number=record.round_number,
        market_price=record.market_price,
        user_price=record.user_price,
        quantity_produced=record.quantity_produced,
        quantity_sold=record.quantity_sold,
        revenue=record.revenue,
        total_cost=record.total_cost,
        profit=record.profit,
        optimal_profit=record.optimal_profit,
        fixed_cost=record.fixed_cost,
    )


def to_round_feedback_data(feedback: RoundFeedback) -> RoundFeedbackData:
    """
    Converts a RoundFeedback object to RoundFeedbackData schema for API responses.
    """
    return RoundFeedbackData(
        pricing_outcome=feedback.pricing_outcome.value,
        marginal_outcome=feedback.marginal_outcome.value,
        effective_selling_price=feedback.effective_selling_price,
        marginal_cost=feedback.marginal_cost,
        next_unit_marginal_cost=feedback.next_unit_marginal_cost,
        average_total_cost=feedback.average_total_cost,
        fixed_cost_shock=feedback.fixed_cost_shock,
        fixed_cost_insight=feedback.fixed_cost_insight,
        title=feedback.title,
        message=feedback.message,
        marginal_message=feedback.marginal_message,
    )


def to_game_state_response(session_id: str, session: GameSession) -> GameStateResponse:
    """
    Converts a GameSession object to GameStateResponse schema for API responses.

    Inputs:
        session_id: The unique identifier for this game session.
        session: The current GameSession.

    What happens:
        Extracts phase, round position and the current scenario.
        Computes the active fixed cost and the cumulative profit from the history.
        Converts all settled rounds to RoundRecordData format.

    Output:
        Returns a GameStateResponse object containing all game state information in API-ready format.

    Context:
        Used in all API endpoints that return game state to the frontend.
        Called after every game action (start, submit, advance, restart).
    """
    return GameStateResponse(
        session_id=session_id,
        phase=session.phase.value,
        round_index=session.round_index,
        round_number=session.current_scenario.round_number,
        total_rounds=session.config.total_rounds,
        is_last_round=session.is_last_round,
        scenario=to_scenario_data(session.current_scenario),
        active_fixed_cost=session.active_fixed_cost,
        fixed_cost_shock=session.is_fixed_cost_shock,
        max_capacity=session.config.max_capacity,
        cumulative_profit=session.cumulative_profit,
        history=[to_round_record_data(r) for r in session.history],
    )


def build_game_summary(session_id: str, session: GameSession) -> GameSummary:
    """
    Builds the end-of-game summary for a finished session.

    Inputs:
        session_id: The unique identifier for this game session.
        session: A GameSession in the end phase.

    What happens:
        Sums the profit over the history.
        Looks up the performance tier for that total.
        Converts every round for the profit vs optimal comparison chart.

    Output:
        Returns a GameSummary.

    Context:
        Called by the /game/summary endpoint once the game is over.
    """
    total_profit = session.cumulative_profit
    tier = classify_performance(total_profit)

    return GameSummary(
        session_id=session_id,
        total_rounds_played=len(session.history),
        total_profit=total_profit,
        max_total_profit=session.config.max_total_profit,
        tier=tier.key,
        tier_title=tier.title,
        tier_message=tier.message,
        rounds=[to_round_record_data(r) for r in session.history],
    )


def build_config_state_response(config: GameConfig | None = None) -> ConfigStateResponse:
    """
    Builds a response containing all current configuration state.

    Inputs:
        config: Configuration to describe (defaults to the current shared config).

    What happens:
        Converts the cost constants and every scenario to API schemas.
        Adds the best achievable total profit.

    Output:
        Returns a ConfigStateResponse.

    Context:
        Used by the /config/current and /config/update endpoints.
    """
    if config is None:
        config = get_current_config()

    cost_model = CostModelData(
        variable_cost_coefficient=config.variable_cost_coefficient,
        default_fixed_cost=config.default_fixed_cost,
        max_capacity=config.max_capacity,
    )

    return ConfigStateResponse(
        cost_model=cost_model,
        scenarios=[to_scenario_data(s) for s in config.scenarios],
        max_total_profit=config.max_total_profit,
    )
