"""
Answer model - append-only record of submitted answers
"""
from sqlalchemy import Column, Integer, Text, Boolean, DateTime, ForeignKey, func
from quizbot.database import Base


class Answer(Base):
    """
    Answers table - one row per answered question, correctness fixed at submission
    """
    __tablename__ = "answers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, nullable=False, index=True)
    quiz_id = Column(
        Integer,
        ForeignKey("quizzes.id", ondelete="CASCADE"),
        nullable=False,
    )
    question_id = Column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
    )
    selected_option = Column(Integer, nullable=False)
    correct = Column(Boolean, nullable=False)
    timestamp = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Answer(user_id={self.user_id}, question_id={self.question_id}, correct={self.correct})>"
