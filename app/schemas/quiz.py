"""
Pydantic schemas for quiz-related requests and responses
"""
from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from datetime import datetime

from app.config import settings


class QuestionCreate(BaseModel):
    """Authoring payload for a single multiple-choice question"""
    text: str = Field(..., min_length=1, description="Question prompt")
    image_url: Optional[str] = Field(None, max_length=2048, description="Optional image URI")
    options: List[str] = Field(
        ...,
        min_length=settings.OPTIONS_PER_QUESTION,
        max_length=settings.OPTIONS_PER_QUESTION,
        description="Answer options, in display order",
    )
    correct_index: int = Field(..., ge=0, description="0-based index of the correct option")
    
    @model_validator(mode="after")
    def check_correct_index(self):
        if self.correct_index >= len(self.options):
            raise ValueError(
                f"correct_index {self.correct_index} is outside options [0, {len(self.options)})"
            )
        return self


class QuizCreate(BaseModel):
    """Request schema for creating a quiz with its questions"""
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = ""
    teacher_id: Optional[int] = None
    questions: List[QuestionCreate] = Field(default_factory=list)


class QuizCreated(BaseModel):
    """Response after quiz creation"""
    id: int


class QuestionOut(BaseModel):
    """Question as served to clients"""
    id: Optional[int] = None
    position: int
    text: str
    image_url: Optional[str] = None
    options: List[str]
    correct_index: int
    
    class Config:
        from_attributes = True


class QuizSummary(BaseModel):
    """Quiz listing entry, without questions"""
    id: int
    title: str
    description: Optional[str] = None
    teacher_id: Optional[int] = None
    created_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True


class QuizDetail(QuizSummary):
    """Quiz with its ordered questions"""
    questions: List[QuestionOut] = Field(default_factory=list)


class DeleteResponse(BaseModel):
    success: bool = True
