from .quiz_generator import (
    GeminiQuizGenerator,
    TemplateQuizGenerator,
    generate_ai_quiz,
    get_quiz_generator,
)
from .badge_minter import (
    BlockfrostBadgeMinter,
    SimulatedBadgeMinter,
    get_badge_minter,
    mint_badge,
)
from .analytics import (
    GeminiProgressAdvisor,
    generate_progress_analytics,
    get_progress_advisor,
)

__all__ = [
    "GeminiQuizGenerator",
    "TemplateQuizGenerator",
    "generate_ai_quiz",
    "get_quiz_generator",
    "BlockfrostBadgeMinter",
    "SimulatedBadgeMinter",
    "get_badge_minter",
    "mint_badge",
    "GeminiProgressAdvisor",
    "generate_progress_analytics",
    "get_progress_advisor",
]
