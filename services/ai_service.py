from openai import OpenAI

from config import Config
from errors import ConfigurationError, MISSING_KEY_MESSAGE
from models import Completion
from utils import normalize_usage


class AIService:
    def __init__(self, config: Config):
        self.config = config
        self.model = config.openai_model
        self._client = None

    @property
    def client(self) -> OpenAI:
        # Built on first use so the server can start without a key
        if self._client is None:
            if not self.config.has_api_key:
                raise ConfigurationError("OPENAI_API_KEY is not set.", MISSING_KEY_MESSAGE)
            # one attempt per request, the SDK retries twice by default
            self._client = OpenAI(api_key=self.config.openai_api_key, max_retries=0)
        return self._client

    def complete(self, system_prompt: str, user_prompt: str) -> Completion:
        """
        Calls the Chat Completions API once and returns the trimmed message
        text together with normalized token usage.
        """
        resp = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
        )
        content = ""
        if resp.choices and resp.choices[0].message:
            content = (resp.choices[0].message.content or "").strip()
        return Completion(content=content, usage=normalize_usage(resp.usage))
