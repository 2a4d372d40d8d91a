"""Shared pytest fixtures."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.dependencies import get_db
from app.core.database import Base, utc_now
from app.main import app
from app.models.answer import Answer
from app.models.question import Question


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_question(db):
    """Insert a question with answers given as (seconds_after_question, is_correct) pairs."""

    def _make(prompt="How do I sort a list?", asked_at=None, answers=(), **tags):
        asked_at = asked_at or utc_now()
        question = Question(prompt=prompt, asked_at=asked_at, updated_at=asked_at, **tags)
        db.add(question)
        db.flush()
        for offset, is_correct in answers:
            created = asked_at + timedelta(seconds=offset)
            db.add(
                Answer(
                    question_id=question.id,
                    content=f"answer after {offset}s",
                    is_correct=is_correct,
                    created_at=created,
                    updated_at=created,
                )
            )
        db.commit()
        db.refresh(question)
        return question

    return _make
