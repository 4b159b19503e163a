"""
Database models package
"""
from quizbot.models.quiz import Quiz, Question
from quizbot.models.answer import Answer

__all__ = ["Quiz", "Question", "Answer"]
