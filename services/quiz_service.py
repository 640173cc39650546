import json
from collections.abc import Mapping

from config import Config
from errors import (ConfigurationError, InvalidJSONError, MISSING_KEY_MESSAGE,
                    NoValidQuestionsError, QuizAppError, UpstreamInvocationError,
                    classify_error)
from log_config import get_logger
from models import GeneratedQuestion, QuizResult, QuizUsage
from prompts import QUIZ_SYSTEM_PROMPT, build_quiz_prompt
from utils import estimate_cost, sanitize_quiz_request

logger = get_logger(__name__)

VALID_OPTIONS = ("A", "B", "C", "D")


def _is_well_formed(item) -> bool:
    if not isinstance(item, Mapping):
        return False
    question = item.get("question")
    if isinstance(question, bool) or not question:
        return False
    if isinstance(question, str) and not question.strip():
        return False
    options = item.get("options")
    return isinstance(options, list) and len(options) == 4


def _text(value) -> str:
    return "" if value is None else str(value)


def clean_questions(items) -> list[GeneratedQuestion]:
    """
    Keep the well-formed question objects and normalize their fields.

    Items without question text or without exactly 4 options are dropped,
    never repaired. Ids fall back to q1, q2, ... by position among the
    survivors.
    """
    if not isinstance(items, list):
        return []

    cleaned = []
    seen_ids = set()
    for position, q in enumerate(filter(_is_well_formed, items), start=1):
        base = _text(q.get("id")).strip() or f"q{position}"
        qid, suffix = base, position
        while qid in seen_ids:
            qid = f"{base}-{suffix}"
            suffix += 1
        seen_ids.add(qid)

        correct = q.get("correctOption")
        cleaned.append(GeneratedQuestion(
            id=qid,
            question=_text(q["question"]),
            options=[_text(o) for o in q["options"]],
            correct_option=correct if correct in VALID_OPTIONS else "A",
            explanation=_text(q.get("explanation")) if q.get("explanation") else "",
        ))
    return cleaned


def parse_questions(raw: str) -> list[GeneratedQuestion]:
    """Parse the model's JSON output; raise if nothing usable comes out."""
    try:
        items = json.loads(raw or "[]")
    except (ValueError, RecursionError):
        logger.error("Could not parse AI output as JSON. Raw content from OpenAI:\n%s", raw)
        raise InvalidJSONError()

    cleaned = clean_questions(items)
    if not cleaned:
        logger.error("No valid questions after cleaning (parsed %s items).",
                     len(items) if isinstance(items, list) else None)
        raise NoValidQuestionsError()

    dropped = len(items) - len(cleaned)
    if dropped:
        logger.info("Dropped %d malformed question(s) from AI output.", dropped)
    return cleaned


class QuizService:
    def __init__(self, config: Config, ai):
        self.config = config
        self.ai = ai

    def generate(self, payload: Mapping) -> QuizResult:
        req = sanitize_quiz_request(payload, self.config.default_topic)
        if not self.config.has_api_key:
            raise ConfigurationError("Failed to call OpenAI API.", MISSING_KEY_MESSAGE)

        prompt = build_quiz_prompt(req.topic, req.request_count, req.difficulty)
        try:
            completion = self.ai.complete(QUIZ_SYSTEM_PROMPT, prompt)
        except Exception as exc:
            logger.exception("OpenAI call failed for quiz on %r", req.topic)
            debug = exc.debug if isinstance(exc, QuizAppError) else classify_error(exc, self.config.has_api_key)
            raise UpstreamInvocationError("Failed to call OpenAI API.", debug, exc) from exc

        # extra questions only cover attrition; the caller gets what they asked for
        questions = parse_questions(completion.content)[:req.count]

        prompt_tokens = completion.usage.prompt_tokens
        completion_tokens = completion.usage.completion_tokens
        usage = QuizUsage(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
            estimated_cost_usd=estimate_cost(prompt_tokens, completion_tokens,
                                             self.config.input_price_per_m,
                                             self.config.output_price_per_m),
        )
        logger.info("Generated %d question(s) on %r (%s), %d tokens, $%.6f",
                    len(questions), req.topic, req.difficulty.value,
                    usage.total_tokens, usage.estimated_cost_usd)
        return QuizResult(topic=req.topic, difficulty=req.difficulty,
                          questions=questions, usage=usage)
