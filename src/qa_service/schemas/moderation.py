from pydantic import BaseModel, ConfigDict, Field


class BadWord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    original: str
    word: str
    deviations: int = 0
    info: int = 0
    start: int = 0
    end: int = 0
    replaced_len: int = Field(default=0, alias="replacedLen")


class ModerationResult(BaseModel):
    """Successful response body of the moderation endpoint."""

    model_config = ConfigDict(extra="ignore")

    content: str
    bad_words_total: int
    bad_words_list: list[BadWord] = Field(default_factory=list)
    censored_content: str


class ModerationErrorBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: str = ""
