from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.dependencies import get_db
from app.models.answer import Answer
from app.schemas.question_schema import AnswerResponse

router = APIRouter()


@router.get("/", response_model=List[AnswerResponse])
def list_answers(db: Session = Depends(get_db)):
    return db.query(Answer).order_by(Answer.created_at.desc()).all()


@router.get("/{answer_id}", response_model=AnswerResponse)
def get_answer(answer_id: UUID, db: Session = Depends(get_db)):
    answer = db.query(Answer).filter(Answer.id == str(answer_id)).first()
    if not answer:
        raise HTTPException(status_code=404, detail="Answer not found")
    return answer
