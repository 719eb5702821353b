"""
Health and status check routes.
"""

from typing import Dict, Any
from fastapi import APIRouter

from app.services.ai_client import (
    DEEPSEEK_MODELS,
    OPENAI_MODEL,
    ai_provider,
    deepseek_client,
    openai_client,
)

router = APIRouter()


@router.get("/")
def root() -> Dict[str, str]:
    """
    Root endpoint that provides basic API information.
    """
    return {"message": "Backend root. Try /health"}


@router.get("/health")
def health_check() -> Dict[str, str]:
    """
    Health check endpoint to verify the backend is running.

    Output:
        Returns a dictionary with status, message, and version information.

    Context:
        Called by monitoring systems and frontend to check if backend is alive.
    """
    return {
        "status": "ok",
        "message": "Backend running",
        "version": "0.1.0"
    }


@router.get("/ai/status")
def ai_status_check() -> Dict[str, Any]:
    """
    Checks the status and connectivity of the AI provider used for coaching commentary.

    Inputs:
        None (checks global AI client configuration).

    What happens:
        Reports which provider (OpenAI or DeepSeek via OpenRouter) is configured.
        If one is configured, sends a tiny test request to it.
        Records whether it is working, has errors, or is not configured.

    Output:
        Returns a dictionary with the active provider, its status and a message.

    Context:
        Called by the frontend to show whether coaching commentary comes from AI
        or from the built-in feedback.
    """
    status: Dict[str, Any] = {
        "openai_configured": openai_client is not None,
        "deepseek_configured": deepseek_client is not None,
        "active_provider": ai_provider,
        "status": "not_configured",
        "message": "Not configured (set OPENAI_API_KEY or OPENROUTER_API_KEY)",
        "test_successful": False,
    }

    if ai_provider == "openai" and openai_client:
        client, model_name = openai_client, OPENAI_MODEL
    elif ai_provider == "deepseek" and deepseek_client:
        client, model_name = deepseek_client, DEEPSEEK_MODELS[-1]
    else:
        return status

    try:
        test_response = client.chat.completions.create(
            model=model_name,
            messages=[
                {"role": "system", "content": "You are a helpful assistant."},
                {"role": "user", "content": "Say OK if you can read this."}
            ],
            max_tokens=10,
        )
        if test_response.choices and test_response.choices[0].message.content:
            status["status"] = "working"
            status["message"] = f"{ai_provider} is working correctly (using {model_name})"
            status["test_successful"] = True
        else:
            status["status"] = "error"
            status["message"] = f"{ai_provider} returned empty response"
    except Exception as e:
        error_str = str(e)
        status["status"] = "error"
        if "invalid_api_key" in error_str or "401" in error_str:
            status["message"] = "Invalid API key. Please check the key in your .env file."
        else:
            status["message"] = f"{ai_provider} error: {error_str}"

    return status
