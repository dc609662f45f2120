"""
Analytics service for quiz and student result summaries
"""
import logging
from typing import Dict, List, Any, Optional
from sqlalchemy.orm import Session
from collections import defaultdict
from app.models import Quiz, Question, Result
from app.services.scoring_service import scoring_service

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Service for summarizing stored results"""
    
    def get_quiz_analytics(self, db: Session, quiz_id: int) -> Optional[Dict[str, Any]]:
        """
        Get aggregate results for one quiz
        
        Args:
            db: Database session
            quiz_id: Quiz id
            
        Returns:
            Dictionary with quiz analytics, or None if the quiz does not exist
        """
        
        quiz = db.query(Quiz).filter(Quiz.id == quiz_id).first()
        if not quiz:
            return None
        
        question_count = db.query(Question).filter(Question.quiz_id == quiz_id).count()
        results = db.query(Result).filter(Result.quiz_id == quiz_id).all()
        
        percentages = [self._percentage(r) for r in results]
        
        return {
            "quiz_id": quiz.id,
            "quiz_title": quiz.title,
            "question_count": question_count,
            "total_attempts": len(results),
            "unique_students": len(set(r.student_id for r in results)),
            "avg_percentage": round(sum(percentages) / len(percentages), 2) if percentages else 0.0,
            "best_percentage": max(percentages) if percentages else 0,
            "worst_percentage": min(percentages) if percentages else 0,
        }
    
    def get_user_performance(self, db: Session, user_id: int) -> Dict[str, Any]:
        """
        Get result history summary for a student
        
        Args:
            db: Database session
            user_id: Student id
            
        Returns:
            Dictionary with performance metrics
        """
        
        rows = (
            db.query(Result, Quiz.title)
            .join(Quiz, Result.quiz_id == Quiz.id)
            .filter(Result.student_id == user_id)
            .order_by(Result.timestamp, Result.id)
            .all()
        )
        
        per_quiz = defaultdict(list)
        titles = {}
        for result, title in rows:
            per_quiz[result.quiz_id].append(result)
            titles[result.quiz_id] = title
        
        quizzes = self._quiz_performance(per_quiz, titles)
        
        percentages = [self._percentage(result) for result, _ in rows]
        avg = sum(percentages) / len(percentages) if percentages else 0.0
        
        weakest = min(quizzes, key=lambda q: q["best_percentage"])["quiz_title"] if quizzes else None
        
        return {
            "user_id": user_id,
            "total_attempts": len(rows),
            "quizzes_taken": len(per_quiz),
            "overall_avg_percentage": round(avg, 2),
            "quizzes": quizzes,
            "weakest_quiz": weakest,
        }
    
    def _quiz_performance(
        self,
        per_quiz: Dict[int, List[Result]],
        titles: Dict[int, str]
    ) -> List[Dict[str, Any]]:
        """Best and latest standing per quiz, best first"""
        
        performance = []
        for quiz_id, results in per_quiz.items():
            latest = results[-1]
            performance.append({
                "quiz_id": quiz_id,
                "quiz_title": titles[quiz_id],
                "attempts": len(results),
                "best_percentage": max(self._percentage(r) for r in results),
                "latest_score": latest.score,
                "latest_total": latest.total,
            })
        
        performance.sort(key=lambda x: x["best_percentage"], reverse=True)
        
        return performance
    
    @staticmethod
    def _percentage(result: Result) -> int:
        return scoring_service.percentage(result.score, result.total)


# Global instance
analytics_service = AnalyticsService()
