"""
Quiz authoring and retrieval API endpoints
"""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List
import logging
from app.database import get_db
from app.exceptions import NotFoundError
from app.api.notifications import get_registry
from app.schemas.notification import NewQuizEvent
from app.schemas.quiz import (
    QuizCreate,
    QuizCreated,
    QuizDetail,
    QuizSummary,
    DeleteResponse,
)
from app.services.notification_registry import ConnectionRegistry
from app.services.quiz_store import QuizStore
from app.utils.cache import cache_service


router = APIRouter(prefix="/api/quizzes", tags=["quizzes"])
logger = logging.getLogger(__name__)


def get_quiz_store(db: Session = Depends(get_db)) -> QuizStore:
    return QuizStore(db)


@router.get("", response_model=List[QuizSummary])
async def list_quizzes(store: QuizStore = Depends(get_quiz_store)):
    """List all quizzes without their questions"""
    return store.list_quizzes()


@router.get("/{quiz_id}", response_model=QuizDetail)
async def get_quiz(quiz_id: int, store: QuizStore = Depends(get_quiz_store)):
    """
    Get a quiz with its questions in presentation order

    - Checks cache first
    - Falls back to the database and caches the result
    """

    cache_key = cache_service.quiz_key(quiz_id)
    cached_quiz = cache_service.get(cache_key)
    if cached_quiz:
        return QuizDetail(**cached_quiz)

    try:
        quiz = store.get_quiz_with_questions(quiz_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Quiz not found")

    detail = QuizDetail.model_validate(quiz)
    cache_service.set(cache_key, detail.model_dump(mode="json"))

    return detail


@router.post("", response_model=QuizCreated, status_code=201)
async def create_quiz(
    request: QuizCreate,
    background_tasks: BackgroundTasks,
    store: QuizStore = Depends(get_quiz_store),
    registry: ConnectionRegistry = Depends(get_registry),
):
    """
    Create a quiz with its questions

    - Quiz and questions are stored in one transaction
    - Connected clients are notified after the response is sent;
      delivery problems never affect this response
    """

    try:
        quiz_id = store.create_quiz_with_questions(
            title=request.title,
            description=request.description,
            teacher_id=request.teacher_id,
            questions=request.questions,
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to create quiz: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to create quiz")

    event = NewQuizEvent(title=request.title)
    background_tasks.add_task(registry.broadcast, event.model_dump())

    return QuizCreated(id=quiz_id)


@router.delete("/{quiz_id}", response_model=DeleteResponse)
async def delete_quiz(quiz_id: int, store: QuizStore = Depends(get_quiz_store)):
    """Delete a quiz and its questions; stored results are kept"""

    try:
        store.delete_quiz_cascade(quiz_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Quiz not found")
    except SQLAlchemyError as e:
        logger.error(f"Failed to delete quiz {quiz_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to delete quiz")

    cache_service.delete(cache_service.quiz_key(quiz_id))

    return DeleteResponse(success=True)
