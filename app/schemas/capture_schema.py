from pydantic import BaseModel, Field, field_validator
from typing import Optional

from app.schemas.question_schema import AnswerResponse, QuestionResponse
from app.services.normalization import is_valid_url


class ChatTurnCapture(BaseModel):
    user_message: str = Field(..., min_length=1, description="The user's question")
    assistant_message: str = Field(..., min_length=1, description="The assistant's answer")
    is_correct: bool = Field(default=False, description="Whether the answer was marked as correct")
    language: Optional[str] = Field(default=None, description="Programming language of the project in use")
    topic_language: Optional[str] = Field(default=None, description="Programming language the question is about")
    framework: Optional[str] = Field(default=None, description="Framework in use (e.g. 'React', 'Django')")
    runtime: Optional[str] = Field(default=None, description="Runtime environment (e.g. 'Node 20', 'CPython 3.12')")
    source_ide: Optional[str] = Field(default=None, description="The IDE being used (e.g. 'Cursor', 'VSCode')")
    github_repo: Optional[str] = Field(
        default=None,
        description="GitHub repository URL from the current workspace (e.g. from git remote origin)",
    )

    @field_validator("user_message", "assistant_message")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("github_repo")
    @classmethod
    def _well_formed_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not is_valid_url(v):
            raise ValueError("must be a well-formed http(s) URL")
        return v


class CaptureResponse(BaseModel):
    message: str = Field(..., description="Human-readable confirmation with both identifiers")
    question: QuestionResponse
    answer: AnswerResponse
