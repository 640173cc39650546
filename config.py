import os
from dotenv import load_dotenv

from log_config import get_logger

load_dotenv()  # loads .env

logger = get_logger(__name__)

DEFAULT_TOPIC = "AZ-900 (Microsoft Azure Fundamentals)"
DEFAULT_MODEL = "gpt-5-mini"

# gpt-5-mini pricing, USD per million tokens
DEFAULT_INPUT_PRICE_PER_M = 0.25
DEFAULT_OUTPUT_PRICE_PER_M = 2.0


def _env_number(name: str, default, cast=float):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %r", name, raw, default)
        return default


class Config:
    """Settings shared by the quiz and explanation pipelines."""

    def __init__(self,
                 openai_api_key: str | None = None,
                 openai_model: str = DEFAULT_MODEL,
                 input_price_per_m: float = DEFAULT_INPUT_PRICE_PER_M,
                 output_price_per_m: float = DEFAULT_OUTPUT_PRICE_PER_M,
                 default_topic: str = DEFAULT_TOPIC,
                 port: int = 3000,
                 log_level: str = "INFO",
                 debug: bool = False):
        self.openai_api_key = openai_api_key
        self.openai_model = openai_model
        self.input_price_per_m = input_price_per_m
        self.output_price_per_m = output_price_per_m
        self.default_topic = default_topic
        self.port = port
        self.log_level = log_level
        self.debug = debug
        # read once; the error classifier gets this instead of the environment
        self.has_api_key = bool(openai_api_key and openai_api_key.strip())

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_model=os.getenv("OPENAI_MODEL", DEFAULT_MODEL),
            input_price_per_m=_env_number("OPENAI_INPUT_PRICE_PER_M", DEFAULT_INPUT_PRICE_PER_M),
            output_price_per_m=_env_number("OPENAI_OUTPUT_PRICE_PER_M", DEFAULT_OUTPUT_PRICE_PER_M),
            default_topic=os.getenv("DEFAULT_TOPIC", "").strip() or DEFAULT_TOPIC,
            port=_env_number("PORT", 3000, cast=int),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            debug=os.getenv("FLASK_DEBUG", "").lower() in ("1", "true", "yes"),
        )
