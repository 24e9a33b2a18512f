"""AI quiz generation with a deterministic template fallback.

Generators return the raw quiz dictionary produced by the model.  The
structure is validated before anything is stored; if generation or
validation fails for any reason a template quiz with the requested number
of placeholder questions is saved instead.
"""

import logging
import os
from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from learnflow import crud
from learnflow.errors import AuthenticationRequired, ValidationFailed
from learnflow.models import DIFFICULTY_LEVELS, Quiz, User
from learnflow.services.llm import GeminiClient, extract_json

logger = logging.getLogger(__name__)

AI_QUIZ_ORDER = 999
DEFAULT_CATEGORY = "AI Generated"

PROMPT_TEMPLATE = """Generate a {difficulty_lower} level quiz about "{topic}" with exactly {num_questions} questions.

Requirements:
- Each question should have exactly 4 multiple choice options
- Only one option should be correct
- Include a brief explanation for each correct answer
- Questions should be appropriate for {difficulty_lower} level learners
- Focus on practical knowledge and understanding
- Make questions engaging and educational

Please respond with a valid JSON object in this exact format:
{{
  "title": "Quiz title here",
  "description": "Brief description of the quiz",
  "questions": [
    {{
      "question": "Question text here?",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correct_answer": 0,
      "explanation": "Explanation of why this answer is correct"
    }}
  ]
}}

Topic: {topic}
Difficulty: {difficulty}
Number of questions: {num_questions}"""


class QuizGenerator(Protocol):
    async def generate(self, topic: str, difficulty: str, num_questions: int) -> dict:
        ...


class GeminiQuizGenerator:

    def __init__(self, client: GeminiClient | None = None):
        self.client = client or GeminiClient()

    async def generate(self, topic: str, difficulty: str, num_questions: int) -> dict:
        prompt = PROMPT_TEMPLATE.format(
            topic=topic,
            difficulty=difficulty,
            difficulty_lower=difficulty.lower(),
            num_questions=num_questions,
        )
        text = await self.client.generate_text(prompt)
        return extract_json(text)


class TemplateQuizGenerator:
    """Offline generator that always produces the template quiz."""

    async def generate(self, topic: str, difficulty: str, num_questions: int) -> dict:
        return template_quiz(topic, difficulty, num_questions)


def template_quiz(topic: str, difficulty: str, num_questions: int) -> dict:
    return {
        "title": f"AI Quiz: {topic}",
        "description": f"An AI-generated {difficulty.lower()} level quiz about {topic}",
        "questions": [
            {
                "question": f"Sample question {i + 1} about {topic}?",
                "options": [
                    f"Correct answer for {topic}",
                    "Incorrect option A",
                    "Incorrect option B",
                    "Incorrect option C",
                ],
                "correct_answer": 0,
                "explanation": f"This explains the correct answer for {topic}.",
            }
            for i in range(num_questions)
        ],
    }


def validate_generated_quiz(data: dict) -> list[dict]:
    """Return normalized questions or raise ``ValidationFailed``."""
    questions = data.get("questions") if isinstance(data, dict) else None
    if not isinstance(questions, list) or not questions:
        raise ValidationFailed("Invalid quiz structure from AI")

    normalized = []
    for i, q in enumerate(questions):
        if not isinstance(q, dict):
            raise ValidationFailed(f"Invalid question structure at index {i}")
        options = q.get("options")
        if (
            not q.get("question")
            or not isinstance(options, list)
            or len(options) != 4
            or not all(isinstance(o, str) for o in options)
        ):
            raise ValidationFailed(f"Invalid question structure at index {i}")
        answer = q.get("correct_answer")
        if isinstance(answer, bool) or not isinstance(answer, int) or not 0 <= answer <= 3:
            raise ValidationFailed(f"Invalid correct answer at index {i}")
        normalized.append(
            {
                "question": str(q["question"]),
                "options": options,
                "correct_answer": answer,
                "explanation": str(q.get("explanation") or ""),
            }
        )
    return normalized


def level_for_difficulty(difficulty: str) -> int:
    if difficulty in DIFFICULTY_LEVELS:
        return DIFFICULTY_LEVELS.index(difficulty) + 1
    return len(DIFFICULTY_LEVELS)


async def generate_ai_quiz(
    db: AsyncSession,
    user: User | None,
    generator: QuizGenerator,
    topic: str,
    difficulty: str,
    num_questions: int,
    category: str | None = None,
    now: datetime | None = None,
) -> Quiz:
    """Generate, validate and store a quiz, falling back to the template."""

    if user is None:
        raise AuthenticationRequired("User must be authenticated to generate AI quizzes")
    if difficulty not in DIFFICULTY_LEVELS:
        raise ValidationFailed(f"Unknown difficulty: {difficulty}")

    try:
        data = await generator.generate(topic, difficulty, num_questions)
        questions = validate_generated_quiz(data)
    except Exception as exc:
        logger.warning(
            "AI quiz generation for %r failed, using template quiz: %s", topic, exc
        )
        data = template_quiz(topic, difficulty, num_questions)
        questions = data["questions"]

    now = now or datetime.utcnow()
    title = data.get("title") if isinstance(data.get("title"), str) else None
    description = (
        data.get("description") if isinstance(data.get("description"), str) else None
    )
    quiz = Quiz(
        title=title or f"AI Quiz: {topic}",
        description=description
        or f"An AI-generated {difficulty.lower()} level quiz about {topic}",
        category=category or DEFAULT_CATEGORY,
        difficulty=difficulty,
        level=level_for_difficulty(difficulty),
        topic=topic,
        order=AI_QUIZ_ORDER,
        is_active=True,
        questions=questions,
        is_ai_generated=True,
        generated_at=now,
        created_by=user.id,
        created_at=now,
    )
    quiz = await crud.create_quiz(db, quiz)
    logger.info("User %s generated quiz %s about %r", user.id, quiz.id, topic)
    return quiz


def get_quiz_generator() -> QuizGenerator:
    """FastAPI dependency selecting the generator from ``QUIZ_GENERATOR``."""
    if os.getenv("QUIZ_GENERATOR", "gemini").lower() == "template":
        return TemplateQuizGenerator()
    return GeminiQuizGenerator()
