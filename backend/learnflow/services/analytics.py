"""Personalized progress analytics.

The learner's attempts are summarized into a small snapshot which the
Gemini model turns into study advice.  Whenever the model is unavailable
or answers with something unusable, a rule-based report built from the
same snapshot is returned instead.
"""

import logging
from datetime import datetime
from typing import Protocol

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from learnflow import crud
from learnflow.errors import AuthenticationRequired
from learnflow.models import Quiz, QuizResult, User
from learnflow.progression import average_score
from learnflow.schemas import ProgressAnalytics
from learnflow.services.llm import GeminiClient, extract_json

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """Analyze this student's learning progress and provide personalized insights:

Student Progress Data:
- Current Level: {current_level}
- Total Quizzes Completed: {total_quizzes_completed}
- Perfect Scores: {total_perfect_scores}
- NFT Badges Earned: {total_nfts_earned}
- Current Streak: {streak_count} days
- Average Score: {average_percent}%
- Strongest Categories: {strongest}
- Areas for Improvement: {weakest}
- Learning Trend: {trend}

Recent Quiz Performance:
{recent}

Please provide a JSON response with the following structure:
{{
  "overall_assessment": "Brief overall assessment of the student's progress",
  "strengths": ["List of 2-3 key strengths"],
  "areas_for_improvement": ["List of 2-3 areas to focus on"],
  "recommendations": ["List of 3-4 specific actionable recommendations"],
  "motivational_message": "Encouraging message based on their progress",
  "next_steps": ["List of 2-3 suggested next steps"],
  "learning_style": "Assessment of their learning pattern",
  "progress_rating": 7
}}

progress_rating is an integer from 1 to 10."""


def _ratio(result: QuizResult) -> float:
    return result.score / result.total_questions if result.total_questions else 0.0


def strongest_categories(
    results: list[QuizResult], quizzes: dict[int, Quiz], limit: int = 3
) -> list[str]:
    """Categories ranked by average score fraction, best first."""
    totals: dict[str, list[float]] = {}
    for r in results:
        quiz = quizzes.get(r.quiz_id)
        category = quiz.category if quiz else "Other"
        totals.setdefault(category, []).append(_ratio(r))
    ranked = sorted(
        totals.items(), key=lambda item: sum(item[1]) / len(item[1]), reverse=True
    )
    return [category for category, _ in ranked[:limit]]


def weakest_areas(results: list[QuizResult]) -> list[str]:
    if not results:
        return ["Complete more quizzes for analysis"]
    if any(_ratio(r) < 0.8 for r in results[-5:]):
        return ["Review fundamental concepts", "Practice more challenging questions"]
    return ["Continue challenging yourself with advanced topics"]


def learning_trend(results: list[QuizResult]) -> str:
    """Compare the last three attempts with the three before them."""
    if len(results) < 2:
        return "Not enough data"
    recent = results[-3:]
    older = results[-6:-3]
    if not older:
        return "Building learning history"
    recent_avg = sum(_ratio(r) for r in recent) / len(recent)
    older_avg = sum(_ratio(r) for r in older) / len(older)
    if recent_avg > older_avg + 0.1:
        return "Improving"
    if recent_avg < older_avg - 0.1:
        return "Declining"
    return "Stable"


def fallback_analytics(snapshot: dict) -> dict:
    level = snapshot["current_level"]
    completed = snapshot["total_quizzes_completed"]
    perfect = snapshot["total_perfect_scores"]
    avg = snapshot["average_score"]
    return {
        "overall_assessment": f"You're at Level {level} with {completed} quizzes completed. "
        + ("Excellent progress!" if avg > 0.8 else "Good foundation, keep practicing!"),
        "strengths": [
            "Achieving perfect scores" if perfect > 0 else "Consistent learning",
            "Progressing through levels" if level > 1 else "Building fundamentals",
            "Commitment to continuous learning",
        ],
        "areas_for_improvement": [
            "Focus on accuracy" if avg < 0.8 else "Challenge yourself with harder topics",
            "Maintain consistent study habits",
            "Explore practical applications",
        ],
        "recommendations": [
            "Review incorrect answers to learn from mistakes",
            "Take time to understand explanations",
            "Practice regularly to maintain momentum",
            "Connect concepts to real-world applications",
        ],
        "motivational_message": "🎉 Great job earning perfect scores! You're mastering these concepts."
        if perfect > 0
        else "🚀 Keep up the great work! Every quiz brings you closer to mastery.",
        "next_steps": [
            "Complete current level to unlock advanced topics"
            if level < 4
            else "Explore specialized advanced areas",
            "Earn more badges with perfect scores",
            "Share your knowledge with the community",
        ],
        "learning_style": "Consistent learner" if completed > 5 else "Getting started",
        "progress_rating": min(10, max(1, round(level * 2 + avg * 4))),
    }


class ProgressAdvisor(Protocol):
    async def analyze(self, snapshot: dict) -> dict:
        ...


class GeminiProgressAdvisor:

    def __init__(self, client: GeminiClient | None = None):
        self.client = client or GeminiClient()

    async def analyze(self, snapshot: dict) -> dict:
        recent = "\n".join(
            f"{i}. Score: {score}/{total} ({round(score / total * 100) if total else 0}%)"
            for i, (score, total) in enumerate(snapshot["recent_scores"], start=1)
        )
        prompt = PROMPT_TEMPLATE.format(
            current_level=snapshot["current_level"],
            total_quizzes_completed=snapshot["total_quizzes_completed"],
            total_perfect_scores=snapshot["total_perfect_scores"],
            total_nfts_earned=snapshot["total_nfts_earned"],
            streak_count=snapshot["streak_count"],
            average_percent=round(snapshot["average_score"] * 100),
            strongest=", ".join(snapshot["strongest_categories"]) or "None yet",
            weakest=", ".join(snapshot["weakest_areas"]),
            trend=snapshot["learning_trend"],
            recent=recent or "No quizzes taken yet",
        )
        return extract_json(await self.client.generate_text(prompt))


def get_progress_advisor() -> ProgressAdvisor:
    return GeminiProgressAdvisor()


async def build_snapshot(db: AsyncSession, user: User) -> dict:
    progress = await crud.get_progress_by_user(db, user.id)
    results = await crud.get_results_by_user(db, user.id)
    quizzes = await crud.get_quizzes_by_ids(db, {r.quiz_id for r in results})
    return {
        "current_level": progress.current_level if progress else 1,
        "total_quizzes_completed": progress.total_quizzes_completed if progress else 0,
        "total_perfect_scores": progress.total_perfect_scores if progress else 0,
        "total_nfts_earned": progress.total_nfts_earned if progress else 0,
        "streak_count": progress.streak_count if progress else 0,
        "average_score": average_score(results),
        "recent_scores": [(r.score, r.total_questions) for r in results[-5:]],
        "strongest_categories": strongest_categories(results, quizzes),
        "weakest_areas": weakest_areas(results),
        "learning_trend": learning_trend(results),
    }


async def generate_progress_analytics(
    db: AsyncSession,
    user: User | None,
    advisor: ProgressAdvisor,
    now: datetime | None = None,
) -> ProgressAnalytics:
    if user is None:
        raise AuthenticationRequired()
    snapshot = await build_snapshot(db, user)
    extra = {
        "strongest_categories": snapshot["strongest_categories"],
        "learning_trend": snapshot["learning_trend"],
        "generated_at": now or datetime.utcnow(),
    }
    try:
        data = await advisor.analyze(snapshot)
        return ProgressAnalytics.model_validate({**data, **extra, "is_fallback": False})
    except ValidationError as exc:
        logger.warning("Unusable analytics response for user %s: %s", user.id, exc)
    except Exception as exc:
        logger.warning("Analytics generation failed for user %s: %s", user.id, exc)
    return ProgressAnalytics(
        **fallback_analytics(snapshot), **extra, is_fallback=True
    )
