"""
Writing prompts offered when starting a new entry.
"""

from typing import Optional

DEFAULT_PROMPTS = [
    {
        "id": "1",
        "content": "What are three things you're grateful for today?",
        "category": "gratitude",
    },
    {
        "id": "2",
        "content": "Describe a challenge you're currently facing and how you plan to overcome it.",
        "category": "reflection",
    },
    {
        "id": "3",
        "content": "What's something that made you smile today?",
        "category": "positivity",
    },
    {
        "id": "4",
        "content": "If you could change one thing about your day, what would it be?",
        "category": "reflection",
    },
    {
        "id": "5",
        "content": "What's a goal you're working toward? What steps have you taken recently?",
        "category": "goals",
    },
]

PROMPT_CATEGORIES = tuple(dict.fromkeys(p["category"] for p in DEFAULT_PROMPTS))


def list_prompts(category: Optional[str] = None) -> list[dict]:
    """Default prompts, optionally limited to one category."""
    if category is None:
        return [dict(p) for p in DEFAULT_PROMPTS]
    return [dict(p) for p in DEFAULT_PROMPTS if p["category"] == category]
