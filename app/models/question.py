"""
Question model - one multiple-choice item of a quiz
"""
from sqlalchemy import Column, Integer, String, Text, JSON, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class Question(Base):
    """
    Questions table - `position` fixes presentation order and answer keying
    """
    __tablename__ = "questions"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    text = Column(Text, nullable=False)
    image_url = Column(String(2048))
    options = Column(JSON, nullable=False)  # ["opt a", "opt b", "opt c", "opt d"]
    correct_index = Column(Integer, nullable=False)
    
    quiz = relationship("Quiz", back_populates="questions")
    
    def __repr__(self):
        return f"<Question(id={self.id}, quiz_id={self.quiz_id}, position={self.position})>"
