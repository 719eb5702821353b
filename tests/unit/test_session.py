"""Tests for the game session state machine.

Coverage:
- Phase transitions intro -> playing -> result -> playing/end
- Actions in the wrong phase
- Input validation at submission
- History, cumulative profit and restart
"""

import math

import pytest

from simulation.core import GamePhase, GameSession, InvalidSubmissionError, PhaseError
from simulation.scenarios import GameConfig, Scenario


def play_optimal_round(session):
    scenario = session.current_scenario
    record = session.submit(scenario.market_price, scenario.optimal_quantity)
    session.advance()
    return record


class TestTransitions:

    def test_new_session_is_on_intro(self, config):
        session = GameSession(config)

        assert session.phase == GamePhase.INTRO
        assert session.round_index == 0
        assert session.history == []

    def test_start_opens_round_one(self, config):
        session = GameSession(config)
        session.start()

        assert session.phase == GamePhase.PLAYING
        assert session.current_scenario.round_number == 1

    def test_submit_settles_round_and_shows_result(self, config):
        session = GameSession(config)
        session.start()

        record = session.submit(180, 6000)

        assert session.phase == GamePhase.RESULT
        assert session.history == [record]
        assert session.round_index == 0
        assert record.profit == pytest.approx(165000)

    def test_advance_moves_to_next_round(self, config):
        session = GameSession(config)
        session.start()
        session.submit(180, 6000)

        session.advance()

        assert session.phase == GamePhase.PLAYING
        assert session.round_index == 1

    def test_full_playthrough_ends_after_last_round(self, config):
        session = GameSession(config)
        session.start()

        for _ in range(config.total_rounds):
            assert len(session.history) <= config.total_rounds
            play_optimal_round(session)

        assert session.phase == GamePhase.END
        assert len(session.history) == config.total_rounds
        assert session.cumulative_profit == pytest.approx(config.max_total_profit)

    def test_is_last_round(self, config):
        session = GameSession(config)
        session.start()
        for _ in range(config.total_rounds - 1):
            assert not session.is_last_round
            play_optimal_round(session)

        assert session.is_last_round


class TestWrongPhase:

    def test_submit_on_intro(self, config):
        session = GameSession(config)

        with pytest.raises(PhaseError):
            session.submit(180, 6000)

    def test_second_submission_for_same_round(self, config):
        session = GameSession(config)
        session.start()
        session.submit(180, 6000)

        with pytest.raises(PhaseError):
            session.submit(180, 6000)
        assert len(session.history) == 1

    def test_advance_while_playing(self, config):
        session = GameSession(config)
        session.start()

        with pytest.raises(PhaseError):
            session.advance()

    def test_start_twice(self, config):
        session = GameSession(config)
        session.start()

        with pytest.raises(PhaseError):
            session.start()

    def test_nothing_after_end_except_restart(self, config):
        session = GameSession(config)
        session.start()
        for _ in range(config.total_rounds):
            play_optimal_round(session)

        with pytest.raises(PhaseError):
            session.advance()
        with pytest.raises(PhaseError):
            session.submit(150, 5000)


class TestSubmissionValidation:

    @pytest.mark.parametrize("price", [-0.01, math.nan, math.inf])
    def test_bad_price(self, config, price):
        session = GameSession(config)
        session.start()

        with pytest.raises(InvalidSubmissionError):
            session.submit(price, 5000)
        assert session.phase == GamePhase.PLAYING
        assert session.history == []

    @pytest.mark.parametrize("quantity", [-1, 10000.5, math.nan])
    def test_bad_quantity(self, config, quantity):
        session = GameSession(config)
        session.start()

        with pytest.raises(InvalidSubmissionError):
            session.submit(150, quantity)

    @pytest.mark.parametrize("quantity", [0, 10000])
    def test_capacity_bounds_are_inclusive(self, config, quantity):
        session = GameSession(config)
        session.start()

        record = session.submit(180, quantity)

        assert record.quantity_produced == quantity

    def test_custom_capacity(self):
        session = GameSession(GameConfig(max_capacity=2000))
        session.start()

        with pytest.raises(InvalidSubmissionError):
            session.submit(180, 2500)


class TestFixedCosts:

    def test_round_4_uses_override(self, config):
        session = GameSession(config)
        session.start()
        for _ in range(3):
            play_optimal_round(session)

        assert session.current_scenario.round_number == 4
        assert session.active_fixed_cost == 500000
        assert session.is_fixed_cost_shock
        assert session.preview(5000).total_cost == pytest.approx(875000)

        record = session.submit(150, 5000)
        assert record.fixed_cost == 500000
        assert record.profit == pytest.approx(-125000)

    def test_round_5_reverts_to_default(self, config):
        session = GameSession(config)
        session.start()
        for _ in range(4):
            play_optimal_round(session)

        assert session.current_scenario.round_number == 5
        assert session.active_fixed_cost == config.default_fixed_cost
        assert not session.is_fixed_cost_shock

    def test_preview_rejects_out_of_range_quantity(self, config):
        session = GameSession(config)

        with pytest.raises(InvalidSubmissionError):
            session.preview(config.max_capacity + 1)


class TestHistoryAndRestart:

    def test_cumulative_profit_is_sum_of_records(self, config):
        session = GameSession(config)
        session.start()
        decisions = [(180, 6000), (170, 5500), (140, 5000)]

        for price, quantity in decisions:
            session.submit(price, quantity)
            session.advance()

        assert session.cumulative_profit == sum(r.profit for r in session.history)
        assert session.cumulative_profit == pytest.approx(165000 - 375000 - 453750 - 50000)

    @pytest.mark.parametrize("rounds_played", [0, 1, 3, 8])
    def test_restart_resets_everything(self, config, rounds_played):
        session = GameSession(config)
        session.start()
        for _ in range(rounds_played):
            play_optimal_round(session)

        session.restart()

        assert session.history == []
        assert session.round_index == 0
        assert session.phase == GamePhase.INTRO
        assert session.cumulative_profit == 0

    def test_restart_from_intro_is_harmless(self, config):
        session = GameSession(config)

        session.restart()
        session.restart()

        assert session.phase == GamePhase.INTRO

    def test_new_playthrough_after_restart(self, config):
        session = GameSession(config)
        session.start()
        play_optimal_round(session)
        session.restart()
        session.start()

        record = session.submit(180, 6000)

        assert record.round_number == 1
        assert len(session.history) == 1

    def test_session_keeps_its_config(self):
        short = GameConfig(scenarios=(
            Scenario(1, 150, "only round", 5000, 0),
        ))
        session = GameSession(short)
        session.start()
        session.submit(150, 5000)
        session.advance()

        assert session.phase == GamePhase.END
