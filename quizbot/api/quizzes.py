"""
Read-only quiz API consumed by the Web App
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from quizbot import messages
from quizbot.database import get_db
from quizbot.schemas.quiz import (
    ErrorResponse,
    QuestionOut,
    QuizDetailResponse,
    QuizListResponse,
    QuizOut,
)
from quizbot.services.quiz_store import quiz_store


router = APIRouter(prefix="/api/quizzes", tags=["quizzes"])
logger = logging.getLogger(__name__)


@router.get("", response_model=QuizListResponse, responses={500: {"model": ErrorResponse}})
async def list_quizzes(db: Session = Depends(get_db)):
    """List all quizzes, newest first"""

    try:
        quizzes = quiz_store.list_quizzes(db)
    except Exception as e:
        logger.error(f"Failed to list quizzes: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=messages.QUIZZES_LOAD_FAILED)

    return QuizListResponse(quizzes=[QuizOut.model_validate(q) for q in quizzes])


@router.get(
    "/{quiz_id}",
    response_model=QuizDetailResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_quiz(quiz_id: int, db: Session = Depends(get_db)):
    """
    Get a quiz with its questions

    Questions are ordered by id; options are returned as a list.
    """

    try:
        found = quiz_store.get_quiz_with_questions(db, quiz_id)
    except Exception as e:
        logger.error(f"Failed to fetch quiz {quiz_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=messages.QUIZ_LOAD_FAILED)

    if found is None:
        raise HTTPException(status_code=404, detail=messages.QUIZ_NOT_FOUND)

    quiz, questions = found
    return QuizDetailResponse(
        quiz=QuizOut.model_validate(quiz),
        questions=[QuestionOut.model_validate(q) for q in questions],
    )
