"""
Result analytics API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from app.database import get_db
from app.schemas.analytics import UserPerformance, QuizAnalytics
from app.services.analytics_service import analytics_service

router = APIRouter(prefix="/api", tags=["analytics"])
logger = logging.getLogger(__name__)


@router.get("/users/{user_id}/performance", response_model=UserPerformance)
async def get_user_performance(
    user_id: int,
    db: Session = Depends(get_db)
):
    """
    Get result history summary for a student
    
    Returns:
    - Attempt and quiz counts
    - Average percentage across attempts
    - Best and latest standing per quiz
    """
    
    try:
        logger.info(f"Fetching performance for user {user_id}")
        
        performance = analytics_service.get_user_performance(db, user_id)
        
        return UserPerformance(**performance)
        
    except Exception as e:
        logger.error(f"Failed to fetch user performance: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch performance: {str(e)}"
        )


@router.get("/quizzes/{quiz_id}/analytics", response_model=QuizAnalytics)
async def get_quiz_analytics(
    quiz_id: int,
    db: Session = Depends(get_db)
):
    """
    Get aggregate results for a quiz
    
    Returns:
    - Attempts and unique students
    - Average, best and worst percentage
    """
    
    try:
        analytics = analytics_service.get_quiz_analytics(db, quiz_id)
        
        if analytics is None:
            raise HTTPException(status_code=404, detail="Quiz not found")
        
        return QuizAnalytics(**analytics)
        
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch quiz analytics: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch quiz analytics: {str(e)}"
        )
