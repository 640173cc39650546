from models import Difficulty

QUIZ_SYSTEM_PROMPT = "You generate exam-style multiple-choice questions in clean JSON."

EXPLAIN_SYSTEM_PROMPT = "You explain concepts clearly for exam students."

QUIZ_DIFFICULTY_GUIDANCE = {
    Difficulty.BEGINNER: "Focus on fundamentals, clear definitions, and simple scenarios.",
    Difficulty.INTERMEDIATE: (
        "Focus on applied scenarios, comparisons between services, and realistic use-cases."
    ),
    Difficulty.EXPERT: (
        "Focus on deeper scenarios, trade-offs, and multi-step reasoning similar to "
        "harder exam questions. Avoid obscure trivia."
    ),
}

EXPLAIN_LEVELS = {
    Difficulty.BEGINNER: "beginner (plain language, minimal jargon)",
    Difficulty.INTERMEDIATE: "intermediate (mix of plain language and technical detail)",
    Difficulty.EXPERT: "advanced (assume some prior knowledge of the topic, focus on depth)",
}

QUIZ_PROMPT_TEMPLATE = """You are an expert exam tutor.

Create {request_count} multiple-choice questions for the topic: "{topic}".

Difficulty: {difficulty}
{guidance}

Requirements:
- Questions should be realistic, practical, and similar to real certification/exam style.
- Each question must have exactly 4 options.
- Only ONE option is correct.
- Questions should be clear and not trick questions.
- DO NOT always use the same correct option. Distribute correctOption fairly across A, B, C, and D within this set.
- Options must NOT include the "A. / B. / C. / D." prefix. Just plain text like "Use Azure Functions for serverless code".

Output strictly as valid JSON like this:

[
  {{
    "id": "q1",
    "question": "Question text here...",
    "options": [
      "Option text 1",
      "Option text 2",
      "Option text 3",
      "Option text 4"
    ],
    "correctOption": "A",
    "explanation": "Short explanation of why A is correct."
  }}
]

Do not include any text before or after the JSON.
"""

EXPLAIN_PROMPT_TEMPLATE = """You are a certification tutor.

Topic / exam: "{topic}"
Student level: {level}

Explain the following term or phrase in a way that helps someone studying for this topic/certification/exam understand the concept clearly:

"{text}"

Formatting (Markdown):
- Start with one line: **Summary:** short one-sentence definition.
- Then one short paragraph (2–3 sentences) under **In simple terms:** explaining it like you would to a junior student.
- Then at most 3 bullet points under **Why it matters for the exam:**.
- Use **bold** for key service names or concepts.
- You may use _italics_ for short clarifications.
- No code blocks.
- Keep the whole answer under about 150–180 words.

Focus:
- Keep it focused on what the term is, when/why it's used, and how it relates to the topic on hand.
- Avoid long lists or deep implementation detail.
"""


def build_quiz_prompt(topic: str, request_count: int, difficulty: Difficulty) -> str:
    return QUIZ_PROMPT_TEMPLATE.format(
        request_count=request_count,
        topic=topic,
        difficulty=difficulty.value.upper(),
        guidance=QUIZ_DIFFICULTY_GUIDANCE[difficulty],
    )


def build_explain_prompt(topic: str, text: str, difficulty: Difficulty) -> str:
    return EXPLAIN_PROMPT_TEMPLATE.format(
        topic=topic,
        level=EXPLAIN_LEVELS[difficulty],
        text=text,
    )
