"""
Pydantic models for quiz generation and explanations.

Python attributes are snake_case; the JSON the browser sees uses the
camelCase aliases (`correctOption`, `estimatedCostUsd`, ...).
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class QuizRequest(CamelModel):
    topic: str
    count: int
    difficulty: Difficulty = Difficulty.BEGINNER

    @property
    def request_count(self) -> int:
        """How many questions to ask the model for, padded for attrition."""
        return min(self.count + 3, 20)


class ExplainRequest(CamelModel):
    topic: str
    text: str
    difficulty: Difficulty = Difficulty.BEGINNER


class GeneratedQuestion(CamelModel):
    id: str
    question: str
    options: List[str] = Field(..., min_length=4, max_length=4)
    correct_option: str = Field("A", alias="correctOption", pattern="^[ABCD]$")
    explanation: str = ""


class TokenUsage(CamelModel):
    prompt_tokens: int = Field(0, alias="promptTokens")
    completion_tokens: int = Field(0, alias="completionTokens")


class Completion(BaseModel):
    """Text and token usage returned by one model call."""
    content: str = ""
    usage: TokenUsage = Field(default_factory=TokenUsage)


class QuizUsage(CamelModel):
    prompt_tokens: int = Field(0, alias="promptTokens")
    completion_tokens: int = Field(0, alias="completionTokens")
    total_tokens: int = Field(0, alias="totalTokens")
    estimated_cost_usd: float = Field(0.0, alias="estimatedCostUsd")


class QuizResult(CamelModel):
    topic: str
    difficulty: Difficulty
    questions: List[GeneratedQuestion] = Field(..., min_length=1)
    usage: QuizUsage


class ExplainResult(CamelModel):
    topic: str
    explanation: str
