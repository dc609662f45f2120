"""
Quiz model - a teacher's ordered collection of questions
"""
from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey, func
from sqlalchemy.orm import relationship
from app.database import Base


class Quiz(Base):
    """
    Quizzes table - questions are owned and deleted with the quiz
    """
    __tablename__ = "quizzes"
    __table_args__ = {"sqlite_autoincrement": True}
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    created_at = Column(TIMESTAMP, server_default=func.now())
    
    questions = relationship(
        "Question",
        back_populates="quiz",
        order_by="Question.position",
        cascade="all, delete-orphan",
    )
    
    def __repr__(self):
        return f"<Quiz(id={self.id}, title={self.title}, teacher_id={self.teacher_id})>"
