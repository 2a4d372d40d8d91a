from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class DateRange(BaseModel):
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class OverviewResponse(BaseModel):
    total_interactions: int
    total_questions: int
    total_answers: int
    avg_answers_per_question: float
    correct_answer_rate: float
    date_range: DateRange = Field(description="Earliest/latest asked_at observed in the window")


class DistributionEntry(BaseModel):
    category: str
    count: int
    percentage: float


class DistributionResponse(BaseModel):
    dimension: str = Field(description="languages | topic-languages | frameworks | runtimes | ides | repositories")
    total: int
    items: List[DistributionEntry]


class TemporalBucket(BaseModel):
    date: datetime = Field(description="UTC start of the bucket")
    count: int


class TemporalResponse(BaseModel):
    interval: Literal["daily", "weekly", "monthly"]
    trends: List[TemporalBucket]


class KeywordEntry(BaseModel):
    keyword: str
    count: int


class KeywordsResponse(BaseModel):
    keywords: List[KeywordEntry]
    total_questions: int


class AnswerQualityResponse(BaseModel):
    total_questions: int
    questions_with_answers: int
    unanswered_questions: int
    questions_with_multiple_answers: int
    questions_with_correct_answer: int
    total_answers: int
    correct_answers: int
    question_answer_rate: float = Field(description="Answered / total questions (3 dp)")
    correct_answer_rate: float = Field(description="Correct / total answers (3 dp)")
    avg_answers_per_question: float = Field(description="Answers per answered question (2 dp)")
    avg_response_time_seconds: float
    median_response_time_seconds: float
