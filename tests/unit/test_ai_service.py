"""Tests for the coaching commentary service and response cleaning."""

from types import SimpleNamespace

import pytest

from app.services import ai_service
from app.utils.ai_helpers import clean_ai_response
from simulation.core import resolve_round
from simulation.feedback import classify_round
from simulation.scenarios import DEFAULT_FIXED_COST, DEFAULT_SCENARIOS


class FakeCompletions:

    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


@pytest.fixture
def settled_round():
    record = resolve_round(DEFAULT_SCENARIOS[2], 140, 5000, DEFAULT_FIXED_COST)
    return record, classify_round(record)


class TestRoundCommentary:

    def test_fallback_without_provider(self, settled_round):
        record, feedback = settled_round

        result = ai_service.generate_round_commentary(record, feedback)

        assert result["source"] == "fallback"
        assert feedback.title in result["message"]
        assert feedback.marginal_message in result["message"]

    def test_openai_answer_is_cleaned(self, monkeypatch, settled_round):
        record, feedback = settled_round
        completions = FakeCompletions(content="**Close!** You asked €140 instead of €150.")
        monkeypatch.setattr(ai_service, "ai_provider", "openai")
        monkeypatch.setattr(ai_service, "openai_client", fake_client(completions))

        result = ai_service.generate_round_commentary(record, feedback)

        assert result == {"message": "Close! You asked €140 instead of €150.", "source": "ai"}
        prompt = completions.calls[0]["messages"][1]["content"]
        assert "Student's price: €140.00" in prompt
        assert "Pricing: underpriced" in prompt

    def test_provider_error_falls_back(self, monkeypatch, settled_round):
        record, feedback = settled_round
        completions = FakeCompletions(error=RuntimeError("401 Unauthorized"))
        monkeypatch.setattr(ai_service, "ai_provider", "openai")
        monkeypatch.setattr(ai_service, "openai_client", fake_client(completions))

        result = ai_service.generate_round_commentary(record, feedback)

        assert result["source"] == "fallback"

    def test_deepseek_tries_every_model_on_empty_answers(self, monkeypatch, settled_round):
        record, feedback = settled_round
        completions = FakeCompletions(content="")
        monkeypatch.setattr(ai_service, "ai_provider", "deepseek")
        monkeypatch.setattr(ai_service, "deepseek_client", fake_client(completions))

        result = ai_service.generate_round_commentary(record, feedback)

        assert result["source"] == "fallback"
        assert [c["model"] for c in completions.calls] == ai_service.DEEPSEEK_MODELS


class TestCleanAiResponse:

    def test_removes_think_block(self):
        assert clean_ai_response("<think>price = MC</think>Produce more.") == "Produce more."

    def test_removes_bullets_and_headings(self):
        assert clean_ai_response("## Tips\n- match the price\n- watch MC") == "Tips\nmatch the price\nwatch MC"

    def test_removes_emojis_keeps_currency(self):
        assert clean_ai_response("Nice 🚀 work at €150!") == "Nice work at €150!"

    def test_empty_after_cleaning(self):
        assert clean_ai_response("```\n```") == ""
