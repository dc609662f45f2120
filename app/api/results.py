"""
Result submission and review API endpoints
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from typing import List
import logging
from app.api.quizzes import get_quiz_store
from app.exceptions import NotFoundError, QuizValidationError
from app.schemas.result import ResultCreate, ResultOut, StudentResult, QuizResult
from app.services.quiz_store import QuizStore


router = APIRouter(prefix="/api/results", tags=["results"])
logger = logging.getLogger(__name__)


@router.post("", response_model=ResultOut, status_code=201)
async def submit_result(submission: ResultCreate, store: QuizStore = Depends(get_quiz_store)):
    """
    Record the score of a completed session

    Repeating a submission with the same session_id returns the stored result
    """

    try:
        return store.record_result(
            quiz_id=submission.quiz_id,
            student_id=submission.student_id,
            score=submission.score,
            total=submission.total,
            session_id=submission.session_id,
        )
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Quiz not found")
    except QuizValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SQLAlchemyError as e:
        logger.error(f"Failed to record result: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to record result")


@router.get("/student/{student_id}", response_model=List[StudentResult])
async def list_student_results(student_id: int, store: QuizStore = Depends(get_quiz_store)):
    """All results of a student with quiz titles, newest first"""
    return store.list_results_for_student(student_id)


@router.get("/quiz/{quiz_id}", response_model=List[QuizResult])
async def list_quiz_results(quiz_id: int, store: QuizStore = Depends(get_quiz_store)):
    """All results of a quiz with student names, newest first"""
    return store.list_results_for_quiz(quiz_id)
