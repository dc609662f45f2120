"""
Snapshot of a client-side quiz session
"""
from pydantic import BaseModel, Field
from typing import Dict, Optional

from app.schemas.quiz import QuestionOut


class SessionSnapshot(BaseModel):
    """Read-only view of a QuizSession returned by `snapshot()`"""
    state: str
    quiz_id: Optional[int] = None
    quiz_title: Optional[str] = None
    position: Optional[int] = None
    total: int = 0
    current_question: Optional[QuestionOut] = None
    answers: Dict[int, int] = Field(default_factory=dict)
    score: Optional[int] = None
    percentage: Optional[int] = None
    error: Optional[str] = None
    submitted: bool = False
    submission_error: Optional[str] = None
