from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from qa_service.database.base import Base
from qa_service.schemas import Answer
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .question import QuestionRecord


class AnswerRecord(Base):
    """SQLAlchemy model for the `answers` table."""
    __tablename__ = "answers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    question_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    # --- Relationships ---

    question: Mapped["QuestionRecord"] = relationship(
        "QuestionRecord",
        back_populates="answers",
        lazy="raise",
    )

    def to_schema(self) -> Answer:
        return Answer(id=self.id, content=self.content, question_id=self.question_id)

    def __repr__(self) -> str:
        return f"<AnswerRecord(id={self.id!r}, question_id={self.question_id!r})>"
