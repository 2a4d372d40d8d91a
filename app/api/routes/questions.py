import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, selectinload

from app.api.dependencies import get_db, get_listing_window
from app.models.answer import Answer
from app.models.question import Question
from app.schemas.question_schema import (
    AnswerResponse,
    DeleteResponse,
    QuestionResponse,
    QuestionWithAnswers,
)
from app.services.date_range import DateWindow, apply_window, today_window

logger = logging.getLogger(__name__)
router = APIRouter()


def _questions_in_window(db: Session, window: DateWindow) -> List[Question]:
    query = db.query(Question).options(selectinload(Question.answers))
    return apply_window(query, Question.asked_at, window).order_by(Question.asked_at.asc()).all()


def _get_question_or_404(db: Session, question_id: UUID) -> Question:
    question = db.query(Question).filter(Question.id == str(question_id)).first()
    if not question:
        raise HTTPException(status_code=404, detail="Question not found")
    return question


@router.get("/", response_model=List[QuestionResponse])
def list_questions(db: Session = Depends(get_db)):
    return db.query(Question).order_by(Question.asked_at.desc()).all()


@router.get("/today", response_model=List[QuestionWithAnswers])
def list_today_questions(db: Session = Depends(get_db)):
    """Questions asked today (UTC) with their answers."""
    return _questions_in_window(db, today_window())


@router.get("/date", response_model=List[QuestionWithAnswers])
def list_questions_by_date(
    window: DateWindow = Depends(get_listing_window),
    db: Session = Depends(get_db),
):
    """Questions for a single `date` or an inclusive `start`/`end` range, with their answers."""
    questions = _questions_in_window(db, window)
    logger.info(
        "Date query [%s, %s) matched %s question(s)",
        window.start.isoformat(),
        window.end.isoformat(),
        len(questions),
    )
    return questions


@router.get("/{question_id}", response_model=QuestionResponse)
def get_question(question_id: UUID, db: Session = Depends(get_db)):
    return _get_question_or_404(db, question_id)


@router.get("/{question_id}/answers", response_model=List[AnswerResponse])
def get_question_answers(question_id: UUID, db: Session = Depends(get_db)):
    question = _get_question_or_404(db, question_id)
    return (
        db.query(Answer)
        .filter(Answer.question_id == question.id)
        .order_by(Answer.created_at.asc())
        .all()
    )


@router.delete("/{question_id}", response_model=DeleteResponse)
def delete_question(question_id: UUID, db: Session = Depends(get_db)):
    """Delete a question; its answers go with it."""
    question = _get_question_or_404(db, question_id)
    deleted_answers = len(question.answers)
    db.delete(question)
    db.commit()
    logger.info("Deleted question %s and %s answer(s)", question_id, deleted_answers)
    return DeleteResponse(
        message="Question and answers deleted",
        id=str(question_id),
        deleted_answers=deleted_answers,
    )
