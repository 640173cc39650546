import json

import pytest

from app import create_app
from config import Config
from models import Completion, TokenUsage


def make_question(qid="q1", question="What is a resource group?", correct="B", **extra):
    item = {
        "id": qid,
        "question": question,
        "options": ["A VM", "A logical container", "A region", "A subscription"],
        "correctOption": correct,
        "explanation": "Resource groups hold related resources.",
    }
    item.update(extra)
    return item


class FakeAI:
    """Stands in for AIService: records calls, replays canned replies."""

    def __init__(self, content="", usage=None, error=None):
        self.content = content
        self.usage = usage or TokenUsage()
        self.error = error
        self.calls = []

    def complete(self, system_prompt, user_prompt):
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return Completion(content=self.content, usage=self.usage)


@pytest.fixture
def config():
    return Config(openai_api_key="sk-test")


@pytest.fixture
def fake_ai():
    questions = [make_question(f"q{i}", f"Question {i}?") for i in range(1, 9)]
    return FakeAI(content=json.dumps(questions),
                  usage=TokenUsage(prompt_tokens=1000, completion_tokens=500))


@pytest.fixture
def client(config, fake_ai):
    app = create_app(config, ai=fake_ai)
    app.config["TESTING"] = True
    return app.test_client()
