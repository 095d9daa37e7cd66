from .question import Answer, AnswerDraft, Question, QuestionDraft
from .moderation import BadWord, ModerationErrorBody, ModerationResult

__all__ = [
    "Answer",
    "AnswerDraft",
    "Question",
    "QuestionDraft",
    "BadWord",
    "ModerationErrorBody",
    "ModerationResult",
]
