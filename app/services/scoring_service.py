"""
Quiz scoring service
Multiple-choice only: an answer is correct when it equals the question's correct_index
"""
import logging
import math
from typing import Any, Dict, List, Mapping, Sequence, Tuple

logger = logging.getLogger(__name__)


class ScoringService:
    """
    Stateless scoring of an answer set against a quiz's questions
    
    - Positions are 0-based and follow question order
    - Unanswered positions count as incorrect
    - Same input always yields the same output
    """
    
    def score(
        self,
        questions: Sequence[Any],
        answers: Mapping[int, int]
    ) -> Tuple[int, int]:
        """
        Score an answer set
        
        Args:
            questions: Ordered questions exposing `correct_index`
            answers: Chosen option index per question position
            
        Returns:
            Tuple of (correct_count, total)
        """
        total = len(questions)
        correct_count = sum(
            1 for position, question in enumerate(questions)
            if self._is_correct(question, answers.get(position))
        )
        
        logger.debug(f"Scored {correct_count}/{total} ({len(answers)} answered)")
        
        return correct_count, total
    
    def percentage(self, correct_count: int, total: int) -> int:
        """
        Percentage rounded half up; a quiz with no questions is 0%
        """
        if total <= 0:
            return 0
        return math.floor(100 * correct_count / total + 0.5)
    
    def breakdown(
        self,
        questions: Sequence[Any],
        answers: Mapping[int, int]
    ) -> List[Dict[str, Any]]:
        """Per-question review rows for a finished session"""
        
        rows = []
        for position, question in enumerate(questions):
            chosen = answers.get(position)
            rows.append({
                "position": position,
                "chosen_index": chosen,
                "correct_index": question.correct_index,
                "is_correct": self._is_correct(question, chosen),
            })
        return rows
    
    def _is_correct(self, question: Any, chosen: Any) -> bool:
        if chosen is None or isinstance(chosen, bool):
            return False
        return chosen == question.correct_index


# Global instance
scoring_service = ScoringService()
