"""
Wire model for the new-quiz notification channel
"""
from pydantic import BaseModel
from typing import Literal

NEW_QUIZ = "NEW_QUIZ"


class NewQuizEvent(BaseModel):
    """Broadcast to every connected client when a quiz is created"""
    type: Literal["NEW_QUIZ"] = NEW_QUIZ
    title: str
