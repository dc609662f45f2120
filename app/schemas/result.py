"""
Pydantic schemas for result submission and review
"""
from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime


class ResultCreate(BaseModel):
    """Schema for submitting a completed session"""
    quiz_id: int
    student_id: int
    score: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    session_id: Optional[str] = Field(
        None, max_length=64, description="Client session id; repeats are not stored twice"
    )
    
    @model_validator(mode="after")
    def check_score_within_total(self):
        if self.score > self.total:
            raise ValueError("score cannot exceed total")
        return self


class ResultOut(BaseModel):
    """Stored result"""
    id: int
    quiz_id: Optional[int] = None
    student_id: int
    score: int
    total: int
    session_id: Optional[str] = None
    timestamp: Optional[datetime] = None
    
    class Config:
        from_attributes = True


class StudentResult(ResultOut):
    """Result row joined with the quiz title"""
    quiz_title: str


class QuizResult(ResultOut):
    """Result row joined with the student's username"""
    student_name: str
