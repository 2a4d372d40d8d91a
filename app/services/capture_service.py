import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.answer import Answer
from app.models.question import Question
from app.schemas.capture_schema import ChatTurnCapture
from app.services.normalization import normalize_language, normalize_repo_url

logger = logging.getLogger(__name__)


class CaptureError(RuntimeError):
    """A chat turn could not be stored."""


@dataclass
class CapturedTurn:
    question: Question
    answer: Answer

    @property
    def message(self) -> str:
        return f"Captured chat turn (q:{self.question.id}, a:{self.answer.id})"


def capture_chat_turn(db: Session, turn: ChatTurnCapture) -> CapturedTurn:
    """Store one question and its answer.

    The question is committed first. If the answer write then fails the
    question is left in place, unanswered, and CaptureError is raised.
    """
    question = Question(
        prompt=turn.user_message,
        language=normalize_language(turn.language),
        topic_language=normalize_language(turn.topic_language),
        framework=turn.framework,
        runtime=turn.runtime,
        source_ide=turn.source_ide,
        github_repo=normalize_repo_url(turn.github_repo),
    )
    try:
        db.add(question)
        db.commit()
        db.refresh(question)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to store captured question")
        raise CaptureError(f"could not store question: {e}") from e

    question_id = question.id
    answer = Answer(
        question_id=question_id,
        content=turn.assistant_message,
        is_correct=turn.is_correct,
    )
    try:
        db.add(answer)
        db.commit()
        db.refresh(answer)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to store answer for question %s (question left unanswered)", question_id)
        raise CaptureError(f"could not store answer for question {question_id}: {e}") from e

    logger.info("Captured chat turn q=%s a=%s language=%s", question.id, answer.id, question.language)
    return CapturedTurn(question=question, answer=answer)
