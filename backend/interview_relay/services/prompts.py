"""
Prompt templates for the interview problem generator.
"""

PROBLEM_COUNT = 5

PROBLEM_LIST_PROMPT = """You are a strict API. Return a JSON array of {count} algorithmic coding interview problems related to "{query}".
Output format: [{{"id": string, "title": string, "difficulty": "Easy"|"Medium"|"Hard"}}]
Do not output markdown. Return ONLY the raw JSON array."""


def build_problem_list_messages(query: str, count: int = PROBLEM_COUNT) -> list[dict]:
    """Build the single-turn message list asking for a problem list about `query`."""
    return [
        {
            "role": "user",
            "content": PROBLEM_LIST_PROMPT.format(count=count, query=query),
        }
    ]
