from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class AnswerResponse(BaseModel):
    id: str
    question_id: str
    content: str
    is_correct: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class QuestionResponse(BaseModel):
    id: str
    prompt: str
    language: Optional[str] = None
    topic_language: Optional[str] = None
    framework: Optional[str] = None
    runtime: Optional[str] = None
    source_ide: Optional[str] = None
    github_repo: Optional[str] = None
    asked_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class QuestionWithAnswers(QuestionResponse):
    answers: List[AnswerResponse] = []


class DeleteResponse(BaseModel):
    message: str
    id: str
    deleted_answers: int
