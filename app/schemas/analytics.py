"""
Pydantic schemas for analytics endpoints
"""
from pydantic import BaseModel
from typing import List, Optional


class QuizAnalytics(BaseModel):
    """Aggregate results for one quiz"""
    quiz_id: int
    quiz_title: str
    question_count: int
    total_attempts: int
    unique_students: int
    avg_percentage: float
    best_percentage: int
    worst_percentage: int


class QuizPerformance(BaseModel):
    """One student's standing on one quiz"""
    quiz_id: int
    quiz_title: str
    attempts: int
    best_percentage: int
    latest_score: int
    latest_total: int


class UserPerformance(BaseModel):
    """Complete result history summary for a student"""
    user_id: int
    total_attempts: int
    quizzes_taken: int
    overall_avg_percentage: float
    quizzes: List[QuizPerformance]
    weakest_quiz: Optional[str] = None
