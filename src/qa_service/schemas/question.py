"""
Wire and domain schemas for questions and answers.

The same pydantic models are used for request bodies, store return values and
response bodies; the ORM records in `qa_service.models` convert to them.
"""

from pydantic import BaseModel, ConfigDict, Field

from qa_service.validators import MAX_INT


class QuestionDraft(BaseModel):
    """
    A question as submitted for creation.

    `id` is only honoured when the service is configured to accept
    client-supplied identities; otherwise the store assigns one and ignores it.
    """

    id: int | None = Field(default=None, le=MAX_INT)
    title: str
    content: str
    tags: list[str] | None = None


class Question(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(le=MAX_INT)
    title: str
    content: str
    tags: list[str] | None = None


class AnswerDraft(BaseModel):
    content: str
    question_id: int


class Answer(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content: str
    question_id: int
