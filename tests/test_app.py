import json

import pytest

from app import create_app
from config import Config
from errors import MISSING_KEY_MESSAGE
from services.explain_service import FALLBACK_EXPLANATION
from tests.conftest import FakeAI, make_question


class RateLimited(Exception):
    status = 429


def make_client(ai, config=None):
    app = create_app(config or Config(openai_api_key="sk-test"), ai=ai)
    app.config["TESTING"] = True
    return app.test_client()


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}


def test_generate_quiz(client, fake_ai):
    resp = client.post("/api/generate-quiz", json={"topic": "Azure Storage", "count": 2, "difficulty": "intermediate"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["topic"] == "Azure Storage"
    assert body["difficulty"] == "intermediate"
    assert len(body["questions"]) == 2
    assert body["questions"][0] == {
        "id": "q1",
        "question": "Question 1?",
        "options": ["A VM", "A logical container", "A region", "A subscription"],
        "correctOption": "B",
        "explanation": "Resource groups hold related resources.",
    }
    assert body["usage"] == {
        "promptTokens": 1000,
        "completionTokens": 500,
        "totalTokens": 1500,
        "estimatedCostUsd": 0.00125,
    }
    assert len(fake_ai.calls) == 1


@pytest.mark.parametrize("count, request_count", [(0, 4), (999, 18), ("lots", 8)])
def test_generate_quiz_pads_clamped_count(client, fake_ai, count, request_count):
    client.post("/api/generate-quiz", json={"count": count})
    _, prompt = fake_ai.calls[0]
    assert f"Create {request_count} multiple-choice questions" in prompt


def test_generate_quiz_defaults_for_missing_body(client, fake_ai):
    resp = client.post("/api/generate-quiz", data="not json", content_type="text/plain")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["topic"] == "AZ-900 (Microsoft Azure Fundamentals)"
    assert body["difficulty"] == "beginner"
    assert len(body["questions"]) == 5


def test_generate_quiz_ignores_non_object_body(client):
    resp = client.post("/api/generate-quiz", json=["topic", "count"])
    assert resp.status_code == 200
    assert resp.get_json()["difficulty"] == "beginner"


def test_generate_quiz_empty_array():
    resp = make_client(FakeAI(content="[]")).post("/api/generate-quiz", json={})

    assert resp.status_code == 500
    body = resp.get_json()
    assert body["error"] == "No valid questions generated from AI."
    assert "properly formatted questions" in body["debug"]


def test_generate_quiz_invalid_json():
    resp = make_client(FakeAI(content="not json")).post("/api/generate-quiz", json={})

    assert resp.status_code == 500
    body = resp.get_json()
    assert body["error"] == "Failed to parse questions from AI (invalid JSON)."
    assert "not json" not in body["debug"]


def test_generate_quiz_deeply_nested_output():
    content = "[" * 100000 + "]" * 100000
    resp = make_client(FakeAI(content=content)).post("/api/generate-quiz", json={})

    assert resp.status_code == 500
    assert resp.get_json()["error"] == "Failed to parse questions from AI (invalid JSON)."


def test_generate_quiz_drops_malformed_items():
    content = json.dumps([
        make_question("keep"),
        {"question": "Only two options?", "options": ["a", "b"]},
        make_question(""),
    ])
    resp = make_client(FakeAI(content=content)).post("/api/generate-quiz", json={"count": 5})

    assert resp.status_code == 200
    assert [q["id"] for q in resp.get_json()["questions"]] == ["keep", "q2"]


def test_generate_quiz_upstream_failure():
    ai = FakeAI(error=RateLimited("too many requests"))
    resp = make_client(ai).post("/api/generate-quiz", json={})

    assert resp.status_code == 500
    assert resp.get_json() == {
        "error": "Failed to call OpenAI API.",
        "debug": "OpenAI API error (status 429). Rate limit or quota exceeded.",
    }
    assert len(ai.calls) == 1


def test_generate_quiz_unexpected_failure():
    class BrokenAI(FakeAI):
        def complete(self, system_prompt, user_prompt):
            super().complete(system_prompt, user_prompt)
            return None

    resp = make_client(BrokenAI()).post("/api/generate-quiz", json={})

    assert resp.status_code == 500
    body = resp.get_json()
    assert body["error"] == "Internal server error."
    assert body["debug"].startswith("Unexpected error:")


def test_explain(client, fake_ai):
    fake_ai.content = "  **Summary:** A container for resources.  "
    resp = client.post("/api/explain", json={"topic": "AZ-104", "text": "resource group", "difficulty": "expert"})

    assert resp.status_code == 200
    assert resp.get_json() == {"topic": "AZ-104", "explanation": "**Summary:** A container for resources."}
    system_prompt, prompt = fake_ai.calls[0]
    assert system_prompt == "You explain concepts clearly for exam students."
    assert '"resource group"' in prompt
    assert "advanced" in prompt


def test_explain_empty_model_output(client, fake_ai):
    fake_ai.content = ""
    resp = client.post("/api/explain", json={"text": "VNet peering"})
    assert resp.get_json()["explanation"] == FALLBACK_EXPLANATION


@pytest.mark.parametrize("payload", [{}, {"text": ""}, {"text": "   "}, {"text": None}])
def test_explain_requires_text(client, fake_ai, payload):
    resp = client.post("/api/explain", json=payload)

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "No text provided to explain."}
    assert fake_ai.calls == []


def test_explain_upstream_failure():
    ai = FakeAI(error=ConnectionRefusedError(111, "Connection refused"))
    resp = make_client(ai).post("/api/explain", json={"text": "NSG"})

    assert resp.status_code == 500
    body = resp.get_json()
    assert body["error"] == "Failed to call OpenAI API for explanation."
    assert body["debug"].startswith("Network error (ECONNREFUSED)")


def test_missing_key_on_both_endpoints(fake_ai):
    client = make_client(fake_ai, Config(openai_api_key=None))

    quiz = client.post("/api/generate-quiz", json={"topic": "Azure"})
    explain = client.post("/api/explain", json={"text": "blob storage"})

    for resp in (quiz, explain):
        assert resp.status_code == 500
        assert resp.get_json()["debug"] == MISSING_KEY_MESSAGE
    assert fake_ai.calls == []


def test_missing_key_overrides_collaborator_failure():
    ai = FakeAI(error=RateLimited("too many requests"))
    client = make_client(ai, Config(openai_api_key="   "))

    resp = client.post("/api/generate-quiz", json={})

    assert resp.get_json()["debug"] == MISSING_KEY_MESSAGE
