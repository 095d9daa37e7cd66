"""
ORM models for the two persisted tables.

Importing this package registers both tables on `Base.metadata`:

    from qa_service.models import QuestionRecord, AnswerRecord
"""

from .question import QuestionRecord
from .answer import AnswerRecord

__all__ = [
    "QuestionRecord",
    "AnswerRecord",
]
