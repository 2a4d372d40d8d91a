from typing import Generator, Optional

from fastapi import HTTPException, Query

from app.core.config import settings
from app.core.database import SessionLocal
from app.services.date_range import (
    DATE_ONLY_PATTERN,
    DateRangeError,
    DateWindow,
    resolve_listing_window,
    resolve_trend_window,
)
from app.services.keyword_extractor import DEFAULT_STOPWORDS, KeywordExtractor


def get_db() -> Generator:
    """
    Dependency Injection function to get a database session.
    It ensures the database connection is closed after the request is finished.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_trend_window(
    start: Optional[str] = Query(default=None, pattern=DATE_ONLY_PATTERN, description="YYYY-MM-DD, inclusive"),
    end: Optional[str] = Query(default=None, pattern=DATE_ONLY_PATTERN, description="YYYY-MM-DD, inclusive"),
) -> Optional[DateWindow]:
    try:
        return resolve_trend_window(start, end)
    except DateRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))


def get_listing_window(
    date: Optional[str] = Query(default=None, pattern=DATE_ONLY_PATTERN, description="Single day, YYYY-MM-DD"),
    start: Optional[str] = Query(default=None, pattern=DATE_ONLY_PATTERN, description="YYYY-MM-DD, inclusive"),
    end: Optional[str] = Query(default=None, pattern=DATE_ONLY_PATTERN, description="YYYY-MM-DD, inclusive"),
) -> DateWindow:
    try:
        return resolve_listing_window(date, start, end)
    except DateRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))


def get_keyword_extractor() -> KeywordExtractor:
    stopwords = set(DEFAULT_STOPWORDS) | {w.lower() for w in settings.KEYWORD_EXTRA_STOPWORDS}
    return KeywordExtractor(stopwords=stopwords, min_length=settings.KEYWORD_MIN_LENGTH)
