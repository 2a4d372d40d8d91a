from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, selectinload

from app.api.dependencies import get_db, get_keyword_extractor, get_trend_window
from app.core.config import settings
from app.models.question import Question
from app.schemas.trends_schema import (
    AnswerQualityResponse,
    DistributionResponse,
    KeywordsResponse,
    OverviewResponse,
    TemporalResponse,
)
from app.services.date_range import DateWindow, apply_window
from app.services.keyword_extractor import KeywordExtractor
from app.services.trends_service import (
    DIMENSIONS,
    compute_answer_quality,
    compute_distribution,
    compute_overview,
    compute_temporal,
)

router = APIRouter()


def _questions_with_answers(db: Session, window: Optional[DateWindow]) -> List[Question]:
    query = db.query(Question).options(selectinload(Question.answers))
    return apply_window(query, Question.asked_at, window).all()


def _distribution(db: Session, window: Optional[DateWindow], dimension: str) -> DistributionResponse:
    attr, fallback = DIMENSIONS[dimension]
    query = apply_window(db.query(getattr(Question, attr)), Question.asked_at, window)
    values = [row[0] for row in query.order_by(Question.asked_at.asc()).all()]
    return DistributionResponse(dimension=dimension, **compute_distribution(values, fallback))


@router.get("/overview", response_model=OverviewResponse)
def get_overview(window: Optional[DateWindow] = Depends(get_trend_window), db: Session = Depends(get_db)):
    """Totals, correctness rate and the observed asked_at range."""
    return compute_overview(_questions_with_answers(db, window))


@router.get("/languages", response_model=DistributionResponse)
def get_languages(window: Optional[DateWindow] = Depends(get_trend_window), db: Session = Depends(get_db)):
    """Language of the project the question was asked from."""
    return _distribution(db, window, "languages")


@router.get("/topic-languages", response_model=DistributionResponse)
def get_topic_languages(window: Optional[DateWindow] = Depends(get_trend_window), db: Session = Depends(get_db)):
    """Language the question is about."""
    return _distribution(db, window, "topic-languages")


@router.get("/frameworks", response_model=DistributionResponse)
def get_frameworks(window: Optional[DateWindow] = Depends(get_trend_window), db: Session = Depends(get_db)):
    return _distribution(db, window, "frameworks")


@router.get("/runtimes", response_model=DistributionResponse)
def get_runtimes(window: Optional[DateWindow] = Depends(get_trend_window), db: Session = Depends(get_db)):
    return _distribution(db, window, "runtimes")


@router.get("/ides", response_model=DistributionResponse)
def get_ides(window: Optional[DateWindow] = Depends(get_trend_window), db: Session = Depends(get_db)):
    return _distribution(db, window, "ides")


@router.get("/repositories", response_model=DistributionResponse)
def get_repositories(window: Optional[DateWindow] = Depends(get_trend_window), db: Session = Depends(get_db)):
    return _distribution(db, window, "repositories")


@router.get("/temporal", response_model=TemporalResponse)
def get_temporal(
    interval: Optional[str] = Query(default=None, description="daily | weekly | monthly (default daily)"),
    window: Optional[DateWindow] = Depends(get_trend_window),
    db: Session = Depends(get_db),
):
    """Question counts per day/week/month. Empty buckets are omitted."""
    query = apply_window(db.query(Question.asked_at), Question.asked_at, window)
    return compute_temporal((row[0] for row in query.all()), interval)


@router.get("/keywords", response_model=KeywordsResponse)
def get_keywords(
    limit: int = Query(default=settings.KEYWORD_DEFAULT_LIMIT, ge=1, description="Top-N keywords"),
    window: Optional[DateWindow] = Depends(get_trend_window),
    db: Session = Depends(get_db),
    extractor: KeywordExtractor = Depends(get_keyword_extractor),
):
    query = apply_window(db.query(Question.prompt), Question.asked_at, window)
    prompts = [row[0] for row in query.order_by(Question.asked_at.asc()).all()]
    keywords = extractor.top_keywords(prompts, limit=limit)
    return KeywordsResponse(
        keywords=[{"keyword": k, "count": c} for k, c in keywords],
        total_questions=len(prompts),
    )


@router.get("/answer-quality", response_model=AnswerQualityResponse)
def get_answer_quality(window: Optional[DateWindow] = Depends(get_trend_window), db: Session = Depends(get_db)):
    """Answer coverage, correctness and time-to-first-answer statistics."""
    return compute_answer_quality(_questions_with_answers(db, window))
