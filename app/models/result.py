"""
Result model - immutable score of one completed session
"""
from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey, UniqueConstraint, func
from app.database import Base


class Result(Base):
    """
    Results table - append-only, one row per completed session
    """
    __tablename__ = "results"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="SET NULL"), nullable=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    score = Column(Integer, nullable=False)
    total = Column(Integer, nullable=False)
    session_id = Column(String(64), nullable=True)  # Client session, for idempotent submits
    timestamp = Column(TIMESTAMP, server_default=func.now(), index=True)
    
    __table_args__ = (
        UniqueConstraint("quiz_id", "student_id", "session_id", name="uq_results_session"),
    )
    
    def __repr__(self):
        return f"<Result(quiz_id={self.quiz_id}, student_id={self.student_id}, score={self.score}/{self.total})>"
