"""
Quiz store - persistence of quizzes, questions and results
"""
import logging
from typing import Any, Dict, List, Optional, Sequence
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.exceptions import NotFoundError, QuizValidationError
from app.models import Quiz, Question, Result, User
from app.schemas.quiz import QuestionCreate

logger = logging.getLogger(__name__)


class QuizStore:
    """
    Store bound to one database session
    
    Quizzes and their questions are written and deleted as a unit.
    Results are append-only.
    """
    
    def __init__(self, db: Session):
        self.db = db
    
    def get_quiz_with_questions(self, quiz_id: int) -> Quiz:
        """
        Fetch a quiz with its questions in position order
        
        Raises:
            NotFoundError: no quiz with that id
        """
        quiz = (
            self.db.query(Quiz)
            .options(selectinload(Quiz.questions))
            .filter(Quiz.id == quiz_id)
            .first()
        )
        if quiz is None:
            raise NotFoundError(f"Quiz {quiz_id} not found")
        return quiz
    
    def list_quizzes(self) -> List[Quiz]:
        return self.db.query(Quiz).order_by(Quiz.id).all()
    
    def create_quiz_with_questions(
        self,
        title: str,
        description: Optional[str],
        teacher_id: Optional[int],
        questions: Sequence[QuestionCreate]
    ) -> int:
        """
        Create a quiz and all its questions in one transaction
        
        Returns:
            New quiz id
        """
        quiz = Quiz(title=title, description=description, teacher_id=teacher_id)
        quiz.questions = [
            Question(
                position=position,
                text=q.text,
                image_url=q.image_url,
                options=list(q.options),
                correct_index=q.correct_index,
            )
            for position, q in enumerate(questions)
        ]
        
        try:
            self.db.add(quiz)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        
        logger.info(f"Quiz created: {quiz.id} ({len(quiz.questions)} questions) by teacher {teacher_id}")
        return quiz.id
    
    def delete_quiz_cascade(self, quiz_id: int) -> bool:
        """
        Delete a quiz together with its questions; its results are kept, detached
        
        Raises:
            NotFoundError: no quiz with that id
        """
        quiz = self.get_quiz_with_questions(quiz_id)
        
        try:
            # Results are kept without their quiz
            self.db.query(Result).filter(Result.quiz_id == quiz_id).update(
                {Result.quiz_id: None}, synchronize_session=False
            )
            self.db.delete(quiz)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        
        logger.info(f"Quiz deleted: {quiz_id}")
        return True
    
    def record_result(
        self,
        quiz_id: int,
        student_id: int,
        score: int,
        total: int,
        session_id: Optional[str] = None
    ) -> Result:
        """
        Append a result; a repeated (quiz, student, session_id) returns the stored row
        
        Raises:
            NotFoundError: quiz does not exist
            QuizValidationError: total differs from the quiz's question count
        """
        quiz = self.get_quiz_with_questions(quiz_id)
        if total != len(quiz.questions):
            raise QuizValidationError(
                f"total {total} does not match {len(quiz.questions)} questions of quiz {quiz_id}"
            )
        
        if session_id:
            existing = self._find_session_result(quiz_id, student_id, session_id)
            if existing:
                logger.info(f"Duplicate submission ignored: quiz {quiz_id}, student {student_id}, session {session_id}")
                return existing
        
        result = Result(
            quiz_id=quiz_id,
            student_id=student_id,
            score=score,
            total=total,
            session_id=session_id,
        )
        
        try:
            self.db.add(result)
            self.db.commit()
            self.db.refresh(result)
        except IntegrityError:
            # Concurrent duplicate of the same session won the insert
            self.db.rollback()
            existing = self._find_session_result(quiz_id, student_id, session_id) if session_id else None
            if existing is None:
                raise
            return existing
        except SQLAlchemyError:
            self.db.rollback()
            raise
        
        logger.info(f"Result recorded: {result.id}, quiz {quiz_id}, student {student_id}, score {score}/{total}")
        return result
    
    def list_results_for_student(self, student_id: int) -> List[Dict[str, Any]]:
        """Results of one student joined with quiz titles, newest first"""
        rows = (
            self.db.query(Result, Quiz.title)
            .join(Quiz, Result.quiz_id == Quiz.id)
            .filter(Result.student_id == student_id)
            .order_by(Result.timestamp.desc(), Result.id.desc())
            .all()
        )
        return [self._result_row(result, quiz_title=title) for result, title in rows]
    
    def list_results_for_quiz(self, quiz_id: int) -> List[Dict[str, Any]]:
        """Results of one quiz joined with student usernames, newest first"""
        rows = (
            self.db.query(Result, User.username)
            .join(User, Result.student_id == User.id)
            .filter(Result.quiz_id == quiz_id)
            .order_by(Result.timestamp.desc(), Result.id.desc())
            .all()
        )
        return [self._result_row(result, student_name=name) for result, name in rows]
    
    def _find_session_result(self, quiz_id: int, student_id: int, session_id: str) -> Optional[Result]:
        return self.db.query(Result).filter(
            Result.quiz_id == quiz_id,
            Result.student_id == student_id,
            Result.session_id == session_id,
        ).first()
    
    @staticmethod
    def _result_row(result: Result, **joined: Any) -> Dict[str, Any]:
        row = {
            "id": result.id,
            "quiz_id": result.quiz_id,
            "student_id": result.student_id,
            "score": result.score,
            "total": result.total,
            "session_id": result.session_id,
            "timestamp": result.timestamp,
        }
        row.update(joined)
        return row
