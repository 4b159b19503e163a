"""
Quiz and Question models - quizzes authored through the admin wizard
"""
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from quizbot.database import Base


class Quiz(Base):
    """
    Quizzes table - one row per authored quiz
    """
    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    created_by = Column(Text)  # Telegram user id, or "system" for seeded content
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    questions = relationship(
        "Question",
        back_populates="quiz",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Question.id",
    )

    def __repr__(self):
        return f"<Quiz(id={self.id}, title={self.title})>"


class Question(Base):
    """
    Questions table - options stored as a JSON list, correct option as an index into it
    """
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    quiz_id = Column(
        Integer,
        ForeignKey("quizzes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    text = Column(Text, nullable=False)
    options = Column(JSON, nullable=False)  # ["Option A", "Option B"]
    correct_option = Column(Integer, nullable=False)  # zero-based

    quiz = relationship("Quiz", back_populates="questions")

    def __repr__(self):
        return f"<Question(id={self.id}, quiz_id={self.quiz_id}, correct_option={self.correct_option})>"
