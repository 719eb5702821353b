"""
Configuration management routes.
"""

import math

from fastapi import APIRouter, HTTPException

from app.schemas import (
    ConfigStateResponse,
    CostCurveResponse,
    UpdateConfigRequest,
)
from app.services.config_service import build_updated_config, save_game_config
from app.services.game_service import build_config_state_response, to_cost_snapshot_data
from simulation.core import cost_reference_table, generate_cost_curve
from simulation.scenarios import get_current_config

router = APIRouter()


@router.get("/config/current", response_model=ConfigStateResponse)
def get_config() -> ConfigStateResponse:
    """
    Returns the current configuration state (cost constants and scenario table).

    Inputs:
        None.

    What happens:
        Calls build_config_state_response() to gather all configuration data.

    Output:
        Returns a ConfigStateResponse with the cost model, every scenario and the
        best achievable total profit.

    Context:
        Called by the frontend to show the instructor the current game balance.
    """
    return build_config_state_response()


@router.post("/config/update", response_model=ConfigStateResponse)
def update_config(request: UpdateConfigRequest) -> ConfigStateResponse:
    """
    Updates the cost constants and/or the scenario table.

    Inputs:
        request: UpdateConfigRequest containing:
            - Optional cost model (variable cost coefficient, default fixed cost, max capacity)
            - Optional scenario list (round numbers must be 1..N in order)

    What happens:
        Merges the update into the current configuration and validates it.
        If invalid, raises a 400 error and nothing is written.
        Saves the configuration to config/game_config.json.
        Reloads the configuration so new games use it.

    Output:
        Returns a ConfigStateResponse with the updated configuration.

    Context:
        Called by the instructor to change game balance. Running games are not affected.
    """
    if request.cost_model is None and request.scenarios is None:
        raise HTTPException(status_code=400, detail="Nothing to update")

    try:
        config = build_updated_config(request)
    except (ValueError, KeyError, TypeError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return build_config_state_response(save_game_config(config))


@router.get("/config/cost-curve", response_model=CostCurveResponse)
def get_cost_curve(fixed_cost: float | None = None) -> CostCurveResponse:
    """
    Returns the MC and ATC curve data plus the reference cost table.

    Inputs:
        fixed_cost: Fixed cost to draw the curves for (query parameter, default fixed cost if omitted).

    What happens:
        Computes cost snapshots from 500 to 10,000 units in steps of 100,
        and the reference rows at 1,000 / 3,000 / 5,000 / 7,000 / 9,000 units.

    Output:
        Returns a CostCurveResponse.

    Context:
        Called by the frontend charts. For a fixed cost shock round the frontend
        passes the round's active fixed cost so the ATC curve shifts while MC stays put.
    """
    config = get_current_config()
    if fixed_cost is None:
        fixed_cost = config.default_fixed_cost
    if not math.isfinite(fixed_cost) or fixed_cost <= 0:
        raise HTTPException(status_code=400, detail="fixed_cost must be a positive number")

    coefficient = config.variable_cost_coefficient
    return CostCurveResponse(
        fixed_cost=fixed_cost,
        points=[to_cost_snapshot_data(c) for c in generate_cost_curve(fixed_cost, coefficient, max_quantity=config.max_capacity)],
        reference_table=[to_cost_snapshot_data(c) for c in cost_reference_table(fixed_cost, coefficient)],
    )
