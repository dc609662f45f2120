"""
Quiz session - drives one student through one quiz, question by question

States: LOADING -> IN_PROGRESS(position) -> COMPLETED, or LOADING -> FAILED.
No backward navigation; a question must be answered before advancing.
"""
import logging
from enum import Enum
from typing import Any, Dict, Optional
from uuid import uuid4

from app.exceptions import QuizAppError, QuizValidationError, TransportError
from app.schemas.quiz import QuestionOut
from app.schemas.session import SessionSnapshot
from app.services.scoring_service import ScoringService, scoring_service

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class QuizSession:
    """
    Single-student, sequential state machine over a quiz

    The store is anything exposing `get_quiz_with_questions(quiz_id)` and
    `record_result(quiz_id, student_id, score, total, session_id)`: the
    HTTP QuizApiClient or the server-side QuizStore.
    """

    def __init__(self, store: Any, student_id: int, scorer: ScoringService = scoring_service):
        self.store = store
        self.student_id = student_id
        self.scorer = scorer
        self.session_id = uuid4().hex

        self.state = SessionState.LOADING
        self.quiz_id: Optional[int] = None
        self.quiz: Any = None
        self.position: Optional[int] = None
        self._answers: Dict[int, int] = {}

        self.score: Optional[int] = None
        self.total: Optional[int] = None
        self.error: Optional[QuizAppError] = None
        self.submitted = False
        self.submission_error: Optional[str] = None

    # --- Operations ---

    def start(self, quiz_id: int) -> SessionSnapshot:
        """
        Load the quiz and move to the first question

        A missing quiz, a rejected request or an unreachable store ends the
        session in FAILED.
        A quiz without questions completes immediately with 0/0.
        """
        if self.quiz_id is not None:
            raise QuizValidationError("Session already started")

        self.quiz_id = quiz_id
        try:
            self.quiz = self.store.get_quiz_with_questions(quiz_id)
        except TransportError as e:
            self._fail(TransportError(f"Could not load quiz, please retry: {e}"))
            return self.snapshot()
        except QuizAppError as e:
            self._fail(e)
            return self.snapshot()

        if not self.questions:
            logger.info(f"Quiz {quiz_id} has no questions, completing session {self.session_id}")
            self._complete()
        else:
            self.state = SessionState.IN_PROGRESS
            self.position = 0

        return self.snapshot()

    def record_answer(self, position: int, option_index: int) -> None:
        """
        Choose an option for the displayed question; may be changed until advancing

        Raises:
            QuizValidationError: not in progress, not the current position,
                or option_index outside the question's options
        """
        self._require_in_progress()

        if position != self.position:
            raise QuizValidationError(
                f"Only the current question ({self.position}) can be answered, got {position}"
            )

        options = self.current_question.options
        if isinstance(option_index, bool) or not isinstance(option_index, int) \
                or not 0 <= option_index < len(options):
            raise QuizValidationError(
                f"Option index {option_index!r} outside [0, {len(options)})"
            )

        self._answers[position] = option_index

    def advance(self) -> SessionSnapshot:
        """
        Move past the answered current question; the last one completes the session

        Raises:
            QuizValidationError: not in progress or current question unanswered
        """
        self._require_in_progress()

        if self.position not in self._answers:
            raise QuizValidationError(f"Question {self.position} has not been answered")

        if self.position == len(self.questions) - 1:
            self._complete()
        else:
            self.position += 1

        return self.snapshot()

    def retry_submission(self) -> SessionSnapshot:
        """Resubmit a completed session whose submission failed"""
        if self.state is not SessionState.COMPLETED:
            raise QuizValidationError("Only a completed session can be submitted")
        if not self.submitted:
            self._submit()
        return self.snapshot()

    def snapshot(self) -> SessionSnapshot:
        """Current state, for rendering"""
        question = self.current_question
        return SessionSnapshot(
            state=self.state.value,
            quiz_id=self.quiz_id,
            quiz_title=getattr(self.quiz, "title", None),
            position=self.position,
            total=len(self.questions),
            current_question=QuestionOut.model_validate(question) if question is not None else None,
            answers=dict(self._answers),
            score=self.score,
            percentage=self.percentage,
            error=str(self.error) if self.error else None,
            submitted=self.submitted,
            submission_error=self.submission_error,
        )

    # --- Views ---

    @property
    def questions(self) -> list:
        return list(self.quiz.questions) if self.quiz is not None else []

    @property
    def current_question(self) -> Any:
        if self.state is not SessionState.IN_PROGRESS:
            return None
        return self.questions[self.position]

    @property
    def answers(self) -> Dict[int, int]:
        return dict(self._answers)

    @property
    def percentage(self) -> Optional[int]:
        if self.state is not SessionState.COMPLETED:
            return None
        return self.scorer.percentage(self.score, self.total)

    # --- Transitions ---

    def _require_in_progress(self) -> None:
        if self.state is not SessionState.IN_PROGRESS:
            raise QuizValidationError(f"Session is {self.state.value}, not in progress")

    def _fail(self, error: QuizAppError) -> None:
        logger.warning(f"Session {self.session_id} failed to load quiz {self.quiz_id}: {error}")
        self.state = SessionState.FAILED
        self.error = error

    def _complete(self) -> None:
        self.score, self.total = self.scorer.score(self.questions, self._answers)
        self.state = SessionState.COMPLETED
        self.position = None
        logger.info(f"Session {self.session_id} completed quiz {self.quiz_id}: {self.score}/{self.total}")
        self._submit()

    def _submit(self) -> None:
        try:
            self.store.record_result(
                quiz_id=self.quiz_id,
                student_id=self.student_id,
                score=self.score,
                total=self.total,
                session_id=self.session_id,
            )
        except QuizAppError as e:
            logger.error(f"Submitting session {self.session_id} failed: {e}")
            self.submission_error = str(e)
            return

        self.submitted = True
        self.submission_error = None
