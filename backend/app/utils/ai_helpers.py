"""
AI utility functions for cleaning AI responses.
"""

import re


def clean_ai_response(message: str) -> str:
    """
    Cleans AI response text to make it suitable for display to players.

    Inputs:
        message: Raw AI response text that may contain markdown, code fences or emojis.

    What happens:
        Removes <think> blocks that some reasoning models emit.
        Removes code fences and markdown formatting (headings, bold, italic, bullets).
        Removes emojis and other decorative characters, keeping currency signs.
        Cleans up extra whitespace and newlines.
        If message becomes empty after cleaning, returns an empty string.

    Output:
        Returns cleaned plain text.

    Context:
        Called on every AI commentary before it is returned to the frontend.
    """
    message = re.sub(r'<think>.*?</think>', '', message, flags=re.DOTALL | re.IGNORECASE)
    message = re.sub(r'```[a-z]*', '', message, flags=re.IGNORECASE)

    # Remove markdown headings, bold (**text**), italic (*text*)
    message = re.sub(r'^\s*#+\s*', '', message, flags=re.MULTILINE)
    message = re.sub(r'\*\*([^*]+)\*\*', r'\1', message)
    message = re.sub(r'\*([^*]+)\*', r'\1', message)
    # Remove bullet points
    message = re.sub(r'^[\s]*[-*•]\s+', '', message, flags=re.MULTILINE)
    # Remove emojis and special characters (keep currency and arithmetic signs)
    message = re.sub(r'[^\w\s\.,!?;:\-\$€%=+/()\'"\n]', '', message)

    # Clean up multiple spaces and newlines
    message = re.sub(r' +', ' ', message)
    message = re.sub(r'\n{3,}', '\n\n', message)
    message = re.sub(r' +([\.,!?;:])', r'\1', message)

    return message.strip()
