"""
Authoring drafts for the create-quiz form

Questions are edited only through the explicit operations below.
"""
from typing import List, Optional

from pydantic import ValidationError

from app.config import settings
from app.exceptions import QuizValidationError
from app.schemas.quiz import QuestionCreate, QuizCreate


class QuestionDraft:
    """Editable question; starts blank with the first option marked correct"""

    def __init__(self, options_count: int = settings.OPTIONS_PER_QUESTION):
        self.text = ""
        self.image_url: Optional[str] = None
        self.options: List[str] = [""] * options_count
        self.correct_index = 0

    def to_create(self) -> QuestionCreate:
        return QuestionCreate(
            text=self.text,
            image_url=self.image_url,
            options=list(self.options),
            correct_index=self.correct_index,
        )


class QuizDraft:
    """A quiz being written by a teacher"""

    def __init__(self, title: str = "", description: str = ""):
        self.title = title
        self.description = description
        self.questions: List[QuestionDraft] = [QuestionDraft()]

    def add_question(self) -> int:
        """Append a blank question; returns its index"""
        self.questions.append(QuestionDraft())
        return len(self.questions) - 1

    def remove_question(self, index: int) -> None:
        self._question(index)
        del self.questions[index]

    def set_text(self, index: int, text: str) -> None:
        self._question(index).text = text

    def set_image(self, index: int, image_url: Optional[str]) -> None:
        self._question(index).image_url = image_url or None

    def set_option(self, index: int, option_index: int, value: str) -> None:
        question = self._question(index)
        self._check_option(question, option_index)
        question.options[option_index] = value

    def set_correct_index(self, index: int, option_index: int) -> None:
        question = self._question(index)
        self._check_option(question, option_index)
        question.correct_index = option_index

    def build(self, teacher_id: Optional[int]) -> QuizCreate:
        """
        Validated create-quiz payload

        Raises:
            QuizValidationError: missing title or blank question text
        """
        try:
            return QuizCreate(
                title=self.title,
                description=self.description,
                teacher_id=teacher_id,
                questions=[q.to_create() for q in self.questions],
            )
        except ValidationError as e:
            raise QuizValidationError(f"Quiz draft is incomplete: {e}") from e

    def _question(self, index: int) -> QuestionDraft:
        if not 0 <= index < len(self.questions):
            raise QuizValidationError(f"No question at index {index}")
        return self.questions[index]

    @staticmethod
    def _check_option(question: QuestionDraft, option_index: int) -> None:
        if not 0 <= option_index < len(question.options):
            raise QuizValidationError(
                f"Option index {option_index} outside [0, {len(question.options)})"
            )
