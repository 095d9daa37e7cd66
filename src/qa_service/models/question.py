from sqlalchemy import JSON, Integer, Text
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import Mapped, mapped_column, relationship
from qa_service.database.base import Base
from qa_service.schemas import Question
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .answer import AnswerRecord

# Postgres stores tags as TEXT[]; other dialects (SQLite in tests) fall back to JSON.
TagList = JSON().with_variant(postgresql.ARRAY(Text), "postgresql")


class QuestionRecord(Base):
    """
    SQLAlchemy model for the `questions` table.

    Only moderated content is ever written to `content`.
    """
    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(Text, nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    tags: Mapped[list[str] | None] = mapped_column(TagList, nullable=True)

    # --- Relationships ---

    # One-to-Many: deleting a question deletes its answers
    answers: Mapped[list["AnswerRecord"]] = relationship(
        "AnswerRecord",
        back_populates="question",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    def to_schema(self) -> Question:
        return Question(
            id=self.id,
            title=self.title,
            content=self.content,
            tags=list(self.tags) if self.tags is not None else None,
        )

    def __repr__(self) -> str:
        return f"<QuestionRecord(id={self.id!r}, title={self.title!r})>"
