"""
AI service for generating coaching commentary on a settled round.
"""

from typing import Any, Dict

from simulation.core import RoundRecord
from simulation.feedback import RoundFeedback
from app.services.ai_client import (
    DEEPSEEK_MODELS,
    OPENAI_MODEL,
    ai_provider,
    deepseek_client,
    openai_client,
)
from app.utils.ai_helpers import clean_ai_response

COACH_SYSTEM_PROMPT = (
    "You are a friendly economics tutor coaching a student who runs a solar panel "
    "factory in a perfectly competitive market. The firm is a price-taker: asking more "
    "than the market price sells nothing, asking less sells everything but at the lower "
    "price. Profit is maximized where price equals marginal cost. Fixed costs never "
    "change marginal cost. Answer in 3-4 short sentences of plain text, no markdown, "
    "no emojis, and do not invent numbers that are not given."
)


def fallback_commentary(feedback: RoundFeedback) -> str:
    """
    Built-in commentary used when no AI provider is available.
    """
    return f"{feedback.title}. {feedback.message} {feedback.marginal_message}"


def build_coach_prompt(record: RoundRecord, feedback: RoundFeedback) -> str:
    """
    Describes the settled round and its classification for the tutor model.
    """
    return f"""ROUND {record.round_number} RESULT:
- Market price: €{record.market_price:.2f}
- Student's price: €{record.user_price:.2f}
- Quantity produced: {record.quantity_produced:,.0f}
- Quantity sold: {record.quantity_sold:,.0f}
- Revenue: €{record.revenue:,.2f}
- Total cost: €{record.total_cost:,.2f} (fixed cost €{record.fixed_cost:,.2f})
- Profit: €{record.profit:,.2f} (best possible this round: €{record.optimal_profit:,.2f})
- Marginal cost of the last unit: €{feedback.marginal_cost:.2f}
- Price actually received per unit: €{feedback.effective_selling_price:.2f}

CLASSIFICATION:
- Pricing: {feedback.pricing_outcome.value}
- Quantity: {feedback.marginal_outcome.value}
- Fixed cost shock this round: {"yes" if feedback.fixed_cost_shock else "no"}

TASK:
Explain to the student what went right or wrong this round and what to do next round."""


def generate_round_commentary(record: RoundRecord, feedback: RoundFeedback) -> Dict[str, Any]:
    """
    Generates coaching commentary on a settled round using OpenAI or DeepSeek.

    Inputs:
        record: The settled RoundRecord to comment on.
        feedback: The deterministic classification of that round.

    What happens:
        Determines which AI client to use (OpenAI or DeepSeek).
        If none is configured, returns the built-in feedback text.
        Sends the round figures and classification to the model.
        For DeepSeek, tries alternative models if one is unavailable or returns nothing.
        Cleans the answer (removes markdown, emojis).
        Falls back to the built-in feedback text on any error or empty answer.

    Output:
        Returns a dictionary with:
        - message: Plain text commentary
        - source: "ai" or "fallback"

    Context:
        Called by the /game/coach endpoint.
        The game engine never depends on this: scores and feedback are deterministic.
    """
    fallback = {"message": fallback_commentary(feedback), "source": "fallback"}

    if ai_provider == "openai" and openai_client:
        client = openai_client
        models_to_try = [OPENAI_MODEL]
    elif ai_provider == "deepseek" and deepseek_client:
        client = deepseek_client
        models_to_try = list(DEEPSEEK_MODELS)
    else:
        return fallback

    messages = [
        {"role": "system", "content": COACH_SYSTEM_PROMPT},
        {"role": "user", "content": build_coach_prompt(record, feedback)},
    ]

    ai_message = None
    last_error = None
    for try_model in models_to_try:
        try:
            response = client.chat.completions.create(
                model=try_model,
                messages=messages,
                temperature=0.5,
                max_tokens=250,
            )
            if response.choices and response.choices[0].message.content:
                ai_message = response.choices[0].message.content
                break
            last_error = f"Model {try_model} returned empty response"
        except Exception as e:
            last_error = f"Model {try_model}: {e}"
            print(f"AI commentary error ({ai_provider}): {last_error}")

    if not ai_message:
        print(f"AI commentary unavailable, using built-in feedback. Last error: {last_error}")
        return fallback

    cleaned = clean_ai_response(ai_message)
    if not cleaned:
        return fallback

    return {"message": cleaned, "source": "ai"}
