from collections.abc import Mapping

from config import Config
from errors import (ConfigurationError, MISSING_KEY_MESSAGE, QuizAppError,
                    UpstreamInvocationError, classify_error)
from log_config import get_logger
from models import ExplainResult
from prompts import EXPLAIN_SYSTEM_PROMPT, build_explain_prompt
from utils import sanitize_explain_request

logger = get_logger(__name__)

FALLBACK_EXPLANATION = "Sorry, I could not generate an explanation."


class ExplainService:
    """Explains a highlighted snippet in Markdown, pitched at the quiz difficulty."""

    def __init__(self, config: Config, ai):
        self.config = config
        self.ai = ai

    def explain(self, payload: Mapping) -> ExplainResult:
        req = sanitize_explain_request(payload, self.config.default_topic)
        if not self.config.has_api_key:
            raise ConfigurationError("Failed to call OpenAI API for explanation.", MISSING_KEY_MESSAGE)

        prompt = build_explain_prompt(req.topic, req.text, req.difficulty)
        try:
            completion = self.ai.complete(EXPLAIN_SYSTEM_PROMPT, prompt)
        except Exception as exc:
            logger.exception("OpenAI call failed for explanation on %r", req.topic)
            debug = exc.debug if isinstance(exc, QuizAppError) else classify_error(exc, self.config.has_api_key)
            raise UpstreamInvocationError("Failed to call OpenAI API for explanation.", debug, exc) from exc

        return ExplainResult(topic=req.topic, explanation=completion.content.strip() or FALLBACK_EXPLANATION)
