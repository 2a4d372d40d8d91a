import uuid

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import relationship

from app.core.database import Base, utc_now


class Question(Base):
    __tablename__ = "questions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    prompt = Column(Text, nullable=False)

    # Classification tags supplied by the capturing IDE/agent (all optional)
    language = Column(String(100), nullable=True)
    topic_language = Column(String(100), nullable=True)
    framework = Column(String(100), nullable=True)
    runtime = Column(String(100), nullable=True)
    source_ide = Column(String(100), nullable=True)
    github_repo = Column(String(500), nullable=True)

    asked_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    answers = relationship(
        "Answer",
        back_populates="question",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Answer.created_at",
    )
