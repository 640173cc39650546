import math
from collections.abc import Mapping

from config import DEFAULT_TOPIC
from errors import ClientInputError
from models import Difficulty, ExplainRequest, QuizRequest, TokenUsage

TOPIC_MAX_CHARS = 80
TEXT_MAX_CHARS = 500  # don't let people paste a whole book

DEFAULT_COUNT = 5
MIN_COUNT, MAX_COUNT = 1, 15

# Accepted names for each usage field, first match wins.
PROMPT_TOKEN_ALIASES = ("prompt_tokens", "input_tokens", "promptTokens", "inputTokens")
COMPLETION_TOKEN_ALIASES = ("completion_tokens", "output_tokens", "completionTokens", "outputTokens")


def sanitize_topic(topic, default: str = DEFAULT_TOPIC) -> str:
    topic = topic.strip()[:TOPIC_MAX_CHARS].strip() if isinstance(topic, str) else ""
    return topic or default[:TOPIC_MAX_CHARS]


def sanitize_count(count) -> int:
    """Parse the requested question count and clamp it to 1..15."""
    try:
        value = int(count)
    except (TypeError, ValueError, OverflowError):
        try:
            value = math.trunc(float(count))
        except (TypeError, ValueError, OverflowError):
            value = DEFAULT_COUNT
    return min(max(value, MIN_COUNT), MAX_COUNT)


def sanitize_difficulty(difficulty) -> Difficulty:
    if isinstance(difficulty, Difficulty):
        return difficulty
    if not isinstance(difficulty, str):
        return Difficulty.BEGINNER
    try:
        return Difficulty(difficulty.strip().lower())
    except ValueError:
        return Difficulty.BEGINNER


def sanitize_quiz_request(payload: Mapping, default_topic: str = DEFAULT_TOPIC) -> QuizRequest:
    return QuizRequest(
        topic=sanitize_topic(payload.get("topic"), default_topic),
        count=sanitize_count(payload.get("count")),
        difficulty=sanitize_difficulty(payload.get("difficulty")),
    )


def sanitize_explain_request(payload: Mapping, default_topic: str = DEFAULT_TOPIC) -> ExplainRequest:
    text = payload.get("text")
    if not isinstance(text, str) or not text.strip():
        raise ClientInputError("No text provided to explain.")
    return ExplainRequest(
        topic=sanitize_topic(payload.get("topic"), default_topic),
        text=text[:TEXT_MAX_CHARS],
        difficulty=sanitize_difficulty(payload.get("difficulty")),
    )


def _read_usage_field(usage, aliases) -> int:
    for name in aliases:
        if isinstance(usage, Mapping):
            value = usage.get(name)
        else:
            value = getattr(usage, name, None)
        if value is None:
            continue
        try:
            return int(value)
        except (TypeError, ValueError, OverflowError):
            continue
    return 0


def normalize_usage(usage) -> TokenUsage:
    """
    Read token counts from a provider usage object or dict.

    Providers disagree on field names (`prompt_tokens` vs `input_tokens`, ...),
    so each field is looked up through its alias list. Missing fields are 0.
    """
    if usage is None:
        return TokenUsage()
    return TokenUsage(
        prompt_tokens=_read_usage_field(usage, PROMPT_TOKEN_ALIASES),
        completion_tokens=_read_usage_field(usage, COMPLETION_TOKEN_ALIASES),
    )


def estimate_cost(prompt_tokens: int, completion_tokens: int,
                  input_price_per_m: float, output_price_per_m: float) -> float:
    """USD cost of one call given per-million-token prices, rounded to 6 places."""
    cost = (prompt_tokens * input_price_per_m + completion_tokens * output_price_per_m) / 1_000_000
    return round(cost, 6)
