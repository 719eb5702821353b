"""
Game management routes.
"""

from uuid import uuid4
from fastapi import APIRouter, HTTPException

from simulation.core import GameSession, PhaseError, InvalidSubmissionError
from simulation.feedback import classify_round
from app.schemas import (
    CoachResponse,
    GameStateRequest,
    GameStateResponse,
    GameSummary,
    PreviewRequest,
    PreviewResponse,
    SubmitRoundRequest,
    SubmitRoundResponse,
)
from app.services.ai_service import generate_round_commentary
from app.services.game_service import (
    build_game_summary,
    is_game_over,
    to_cost_snapshot_data,
    to_game_state_response,
    to_round_feedback_data,
    to_round_record_data,
)
from app.services.state import SESSIONS

router = APIRouter()


def get_session(session_id: str) -> GameSession:
    """
    Looks up a game session, raising a 404 error if it does not exist.
    """
    session = SESSIONS.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.post("/game/new", response_model=GameStateResponse)
def new_game() -> GameStateResponse:
    """
    Creates a new game session on the intro screen.

    Inputs:
        None.

    What happens:
        Creates a new unique session ID.
        Creates a GameSession bound to the current configuration (scenario table
        and cost constants). Later configuration updates do not affect it.
        Stores the session in the SESSIONS dictionary.

    Output:
        Returns a GameStateResponse in phase "intro".
        Includes the session_id that must be used for all subsequent requests.

    Context:
        Called when the player opens the game. Must be called before any other game action.
    """
    session_id = str(uuid4())
    session = GameSession()
    SESSIONS[session_id] = session
    return to_game_state_response(session_id, session)


@router.post("/game/start", response_model=GameStateResponse)
def start_game(request: GameStateRequest) -> GameStateResponse:
    """
    Leaves the intro screen and opens round 1.
    """
    session = get_session(request.session_id)
    try:
        session.start()
    except PhaseError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return to_game_state_response(request.session_id, session)


@router.post("/game/state", response_model=GameStateResponse)
def get_game_state(request: GameStateRequest) -> GameStateResponse:
    """
    Retrieves the current game state for a session.

    Inputs:
        request: GameStateRequest containing the session_id.

    What happens:
        Looks up the session; raises a 404 error if not found.
        Converts it to GameStateResponse format.

    Output:
        Returns the phase, current scenario, cumulative profit and history.

    Context:
        Called by the frontend to refresh its display without performing any action.
    """
    session = get_session(request.session_id)
    return to_game_state_response(request.session_id, session)


@router.post("/game/preview", response_model=PreviewResponse)
def preview_costs(request: PreviewRequest) -> PreviewResponse:
    """
    Returns the projected costs of a candidate quantity for the current round.

    Inputs:
        request: PreviewRequest containing session_id and the quantity on the slider.

    What happens:
        Computes the cost snapshot with the current round's fixed cost,
        including any fixed cost override.

    Output:
        Returns a PreviewResponse with total, marginal and average total cost.

    Context:
        Called while the player moves the quantity slider, before submitting.
    """
    session = get_session(request.session_id)
    try:
        costs = session.preview(request.quantity)
    except InvalidSubmissionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PreviewResponse(
        costs=to_cost_snapshot_data(costs),
        fixed_cost_shock=session.is_fixed_cost_shock,
    )


@router.post("/game/submit", response_model=SubmitRoundResponse)
def submit_round(request: SubmitRoundRequest) -> SubmitRoundResponse:
    """
    Processes the player's price and quantity and settles the current round.

    Inputs:
        request: SubmitRoundRequest containing:
            - session_id: Game session identifier
            - price: Asking price per unit
            - quantity: Units to produce

    What happens:
        Looks up the game session.
        Submits the decision; the session validates it, resolves the round
        against the current scenario and moves to the result phase.
        Classifies the settled round for the result screen.

    Output:
        Returns a SubmitRoundResponse containing:
        - Updated game state (phase "result", history with the new round)
        - The settled round record
        - Pricing and marginal feedback

    Context:
        Main gameplay action. Only allowed while a round is being played;
        a second submission for the same round is rejected with 400.
    """
    session = get_session(request.session_id)
    try:
        record = session.submit(request.price, request.quantity)
    except (PhaseError, InvalidSubmissionError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    feedback = classify_round(
        record,
        default_fixed_cost=session.config.default_fixed_cost,
        coefficient=session.config.variable_cost_coefficient,
    )

    return SubmitRoundResponse(
        state=to_game_state_response(request.session_id, session),
        record=to_round_record_data(record),
        feedback=to_round_feedback_data(feedback),
    )


@router.post("/game/advance", response_model=GameStateResponse)
def advance_round(request: GameStateRequest) -> GameStateResponse:
    """
    Moves from the result screen to the next round, or to the end screen after the last round.
    """
    session = get_session(request.session_id)
    try:
        session.advance()
    except PhaseError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return to_game_state_response(request.session_id, session)


@router.post("/game/restart", response_model=GameStateResponse)
def restart_game(request: GameStateRequest) -> GameStateResponse:
    """
    Clears the history and returns the session to the intro screen.
    """
    session = get_session(request.session_id)
    session.restart()
    return to_game_state_response(request.session_id, session)


@router.get("/game/summary", response_model=GameSummary)
def get_game_summary(session_id: str) -> GameSummary:
    """
    Generates the end-of-game summary.

    Inputs:
        session_id: The unique identifier for the game session.

    What happens:
        Looks up the session.
        Verifies the game is over (raises error if not).
        Totals the profit, looks up the performance tier, and lists every round.

    Output:
        Returns a GameSummary with total profit, best possible profit, tier and rounds.

    Context:
        Called by the frontend to draw the end screen.
    """
    session = get_session(session_id)

    if not is_game_over(session):
        raise HTTPException(
            status_code=400,
            detail="Game is not over yet.",
        )

    return build_game_summary(session_id, session)


@router.post("/game/coach", response_model=CoachResponse)
def coach_last_round(request: GameStateRequest) -> CoachResponse:
    """
    Returns tutor commentary on the most recently settled round.

    Inputs:
        request: GameStateRequest containing the session_id.

    What happens:
        Takes the last record from the history (400 if no round was played yet).
        Classifies it and asks the configured AI provider for commentary.
        Without a provider, or on any AI error, returns the built-in feedback text.

    Output:
        Returns a CoachResponse with the message and its source ("ai" or "fallback").

    Context:
        Optional extra on the result screen. Never changes the session.
    """
    session = get_session(request.session_id)
    record = session.last_record
    if record is None:
        raise HTTPException(status_code=400, detail="No round has been played yet.")

    feedback = classify_round(
        record,
        default_fixed_cost=session.config.default_fixed_cost,
        coefficient=session.config.variable_cost_coefficient,
    )
    result = generate_round_commentary(record, feedback)

    return CoachResponse(
        round_number=record.round_number,
        message=result["message"],
        source=result["source"],
    )
