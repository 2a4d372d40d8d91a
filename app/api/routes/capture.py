from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.dependencies import get_db
from app.schemas.capture_schema import CaptureResponse, ChatTurnCapture
from app.schemas.question_schema import AnswerResponse, QuestionResponse
from app.services.capture_service import CaptureError, capture_chat_turn

router = APIRouter()


@router.post("/", response_model=CaptureResponse, status_code=201)
def capture_turn(request: ChatTurnCapture, db: Session = Depends(get_db)):
    """
    Capture a user question and the assistant's answer in one call.
    Same operation as the MCP `capture_chat_turn` tool, for clients that speak plain HTTP.
    """
    try:
        turn = capture_chat_turn(db, request)
    except CaptureError as e:
        raise HTTPException(status_code=500, detail=f"Failed to capture chat turn: {e}")

    return CaptureResponse(
        message=turn.message,
        question=QuestionResponse.model_validate(turn.question),
        answer=AnswerResponse.model_validate(turn.answer),
    )
