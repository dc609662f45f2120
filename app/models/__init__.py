"""
Database models package
"""
from app.models.user import User
from app.models.quiz import Quiz
from app.models.question import Question
from app.models.result import Result

__all__ = ["User", "Quiz", "Question", "Result"]
