from datetime import datetime, timezone
from typing import Annotated, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from quizgen.errors import FailureReason

ANSWER_LETTERS = ("A", "B", "C", "D")

Difficulty = Literal["easy", "medium", "hard"]


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    document_payload: Union[bytes, str]
    question_count: int = Field(4, ge=1)
    model: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    source_name: str = "document.pdf"


class ExtractedPage(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    fragments: tuple[str, ...] = ()

    @property
    def text(self) -> str:
        return " ".join(self.fragments)


class ExtractedText(BaseModel):
    model_config = ConfigDict(frozen=True)

    pages: tuple[ExtractedPage, ...]

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def text(self) -> str:
        return "\n\n".join(page.text for page in self.pages)


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    question: str
    options: list[str] = Field(min_length=4, max_length=4)
    answer: Literal["A", "B", "C", "D"]
    explanation: Optional[str] = None

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("question text is empty")
        return value

    @property
    def correct_index(self) -> int:
        return ANSWER_LETTERS.index(self.answer)


class Quiz(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    title: str = "Quiz"
    questions: list[Question] = Field(min_length=1)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source_name: str = "document.pdf"


class GenerationSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    quiz: Quiz


class GenerationDegraded(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["degraded"] = "degraded"
    quiz: Quiz
    reason: FailureReason


GenerationResult = Annotated[
    Union[GenerationSuccess, GenerationDegraded], Field(discriminator="status")
]


# Wire models for the HTTP surface (camelCase on the wire)

class UploadedFile(BaseModel):
    data: str
    name: str = "document.pdf"


class Customization(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    num_questions: Optional[int] = Field(None, alias="numQuestions", ge=1)
    model: Optional[str] = None
    difficulty: Optional[Difficulty] = None


class QuizGenerationRequest(BaseModel):
    files: list[UploadedFile]
    customization: Optional[Customization] = None


class QuizGenerationResponse(BaseModel):
    success: bool
    questions: Optional[list[Question]] = None
    title: Optional[str] = None
    degraded: bool = False
    reason: Optional[FailureReason] = None
    error: Optional[str] = None


class TitleRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName")


class TitleResponse(BaseModel):
    title: str
