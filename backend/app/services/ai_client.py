"""
AI client initialization and access.
This module handles OpenAI and DeepSeek client setup for the coaching commentary.
"""

import os
from openai import OpenAI
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Supports both OpenAI and DeepSeek via OpenRouter
# Priority: OpenAI if OPENAI_API_KEY is set, otherwise DeepSeek via OpenRouter if OPENROUTER_API_KEY is set
openai_client = None
deepseek_client = None
ai_provider = None  # "openai" or "deepseek"

OPENAI_MODEL = "gpt-4o-mini"
DEEPSEEK_MODELS = [
    "deepseek/deepseek-r1-0528:free",
    "deepseek/deepseek-chat:free",
    "deepseek/deepseek-chat",
]


def is_placeholder_key(key: str) -> bool:
    """
    Checks whether an API key is an unedited placeholder from the example .env file.
    """
    lowered = key.lower()
    return "your" in lowered or "here" in lowered or len(key) < 20


# Initialize OpenAI client (if API key is provided)
openai_key = os.getenv("OPENAI_API_KEY")
if openai_key and openai_key.strip():
    if is_placeholder_key(openai_key):
        print("WARNING: OPENAI_API_KEY appears to be a placeholder. Please set a real API key in .env file.")
    else:
        openai_client = OpenAI(api_key=openai_key)
        ai_provider = "openai"
        print("OpenAI client initialized for coaching commentary")

# Fallback to DeepSeek via OpenRouter if OpenAI is not configured
if not openai_client:
    openrouter_key = os.getenv("OPENROUTER_API_KEY")
    if openrouter_key and openrouter_key.strip():
        if is_placeholder_key(openrouter_key):
            print("WARNING: OPENROUTER_API_KEY appears to be a placeholder. Please set a real API key in .env file.")
        else:
            deepseek_client = OpenAI(
                api_key=openrouter_key,
                base_url="https://openrouter.ai/api/v1"
            )
            ai_provider = "deepseek"
            print("DeepSeek client initialized via OpenRouter for coaching commentary")

if not openai_client and not deepseek_client:
    print("No AI provider configured. Coaching commentary will use the built-in feedback.")
