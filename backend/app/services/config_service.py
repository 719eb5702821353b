"""
Configuration service for validating, saving and reloading the game configuration.
"""

import json
from typing import Any, Dict

from app.schemas import UpdateConfigRequest
from simulation import scenarios
from simulation.scenarios import (
    GameConfig,
    game_config_from_dict,
    game_config_to_dict,
    get_current_config,
    reload_defaults,
)


def build_updated_config(request: UpdateConfigRequest) -> GameConfig:
    """
    Merges a configuration update into the current configuration.

    Inputs:
        request: UpdateConfigRequest with an optional cost model and an optional scenario table.

    What happens:
        Starts from the current configuration as a dictionary.
        Replaces the cost constants if provided.
        Replaces the scenario table if provided. Scenarios without optimal values
        get them derived from price = marginal cost under the new cost constants.
        Builds a new GameConfig, which validates positive constants and round numbers 1..N.

    Output:
        Returns the new, validated GameConfig (not yet saved).

    Context:
        Called by the /config/update endpoint before anything is written to disk.
        Raises ValueError if the result is invalid.
    """
    data: Dict[str, Any] = game_config_to_dict(get_current_config())

    if request.cost_model is not None:
        data.update(request.cost_model.model_dump())
        if request.scenarios is None:
            # Optimal values depend on the cost constants, so derive them again
            for item in data["scenarios"]:
                item.pop("optimal_quantity", None)
                item.pop("optimal_profit", None)

    if request.scenarios is not None:
        data["scenarios"] = [
            s.model_dump(exclude_none=True) for s in request.scenarios
        ]

    return game_config_from_dict(data)


def save_game_config(config: GameConfig) -> GameConfig:
    """
    Writes a configuration to disk and makes it the shared configuration.

    Inputs:
        config: A validated GameConfig.

    What happens:
        Writes the configuration as JSON, creating the directory if needed.
        Reloads the shared configuration from disk so new sessions use it.

    Output:
        Returns the reloaded GameConfig.

    Context:
        Called by the /config/update endpoint after build_updated_config() succeeds.
    """
    path = scenarios.GAME_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(game_config_to_dict(config), indent=2))
    return reload_defaults()
