"""
Quiz store - persistence of quizzes, questions and submitted answers
"""
import logging
from typing import List, Optional, Sequence, Tuple
from sqlalchemy import case, func
from sqlalchemy.orm import Session

from quizbot.models import Quiz, Question, Answer
from quizbot.schemas.quiz import QuestionCreate
from quizbot.schemas.results import UserResult
from quizbot.schemas.webapp import GradedAnswer

logger = logging.getLogger(__name__)

SYSTEM_CREATOR = "system"

EXAMPLE_QUIZ_TITLE = "Example quiz: Telegram basics"
EXAMPLE_QUESTIONS = [
    QuestionCreate(
        text="What is the official messenger app on smartphones called?",
        options=["Telegram", "Telegraph", "Telechat", "MessageMe"],
        correct_option=0,
    ),
    QuestionCreate(
        text="What do you need to do to start talking to a bot?",
        options=[
            "Find the bot by name and tap «Start»",
            "Write to Telegram support",
            "Turn on a VPN",
            "Add the bot to your phone contacts",
        ],
        correct_option=0,
    ),
]


class QuizStore:
    """
    Data access for quizzes

    Every write spanning several rows runs in a single transaction:
    on failure the session is rolled back and the error propagates.
    """

    def list_quizzes(self, db: Session) -> List[Quiz]:
        """All quizzes, newest first"""
        return db.query(Quiz).order_by(Quiz.created_at.desc(), Quiz.id.desc()).all()

    def count_quizzes(self, db: Session) -> int:
        return db.query(func.count(Quiz.id)).scalar()

    def get_quiz_with_questions(
        self,
        db: Session,
        quiz_id: int
    ) -> Optional[Tuple[Quiz, List[Question]]]:
        """
        Fetch a quiz and its questions ordered by id

        Returns:
            (quiz, questions) or None if the quiz does not exist
        """
        quiz = db.query(Quiz).filter(Quiz.id == quiz_id).first()
        if not quiz:
            return None

        questions = (
            db.query(Question)
            .filter(Question.quiz_id == quiz_id)
            .order_by(Question.id.asc())
            .all()
        )
        return quiz, questions

    def create_quiz(
        self,
        db: Session,
        title: str,
        created_by: Optional[str],
        questions: Sequence[QuestionCreate]
    ) -> int:
        """
        Insert a quiz with its questions atomically

        Args:
            db: Database session
            title: Quiz title
            created_by: Creator identity
            questions: Questions in display order

        Returns:
            The new quiz id
        """
        try:
            quiz = Quiz(title=title, created_by=created_by)
            db.add(quiz)
            db.flush()
            quiz_id = quiz.id

            for question in questions:
                db.add(Question(
                    quiz_id=quiz_id,
                    text=question.text,
                    options=list(question.options),
                    correct_option=question.correct_option,
                ))
                db.flush()

            db.commit()
        except Exception as e:
            logger.error(f"Failed to create quiz '{title}': {str(e)}")
            db.rollback()
            raise

        logger.info(f"Quiz created: {quiz_id} ({len(questions)} questions) by {created_by}")
        return quiz_id

    def save_answers(
        self,
        db: Session,
        user_id: str,
        quiz_id: int,
        answers: Sequence[GradedAnswer]
    ) -> None:
        """Record graded answers of one submission atomically"""
        try:
            for answer in answers:
                db.add(Answer(
                    user_id=str(user_id),
                    quiz_id=quiz_id,
                    question_id=answer.question_id,
                    selected_option=answer.selected_option,
                    correct=bool(answer.correct),
                ))
                db.flush()

            db.commit()
        except Exception as e:
            logger.error(f"Failed to save answers of user {user_id} for quiz {quiz_id}: {str(e)}")
            db.rollback()
            raise

        logger.info(f"Saved {len(answers)} answers: user={user_id}, quiz={quiz_id}")

    def get_user_results(self, db: Session, user_id: str, limit: int = 10) -> List[UserResult]:
        """
        Per-quiz aggregates of a user's answers, most recently taken first

        Args:
            db: Database session
            user_id: Telegram user id
            limit: Maximum number of quizzes to return

        Returns:
            List of UserResult, empty if the user never answered
        """
        last_taken_at = func.max(Answer.timestamp).label("last_taken_at")

        rows = (
            db.query(
                Quiz.id.label("quiz_id"),
                Quiz.title,
                func.count(Answer.id).label("total_answers"),
                func.sum(case((Answer.correct, 1), else_=0)).label("correct_answers"),
                last_taken_at,
            )
            .join(Answer, Answer.quiz_id == Quiz.id)
            .filter(Answer.user_id == str(user_id))
            .group_by(Quiz.id, Quiz.title)
            .order_by(last_taken_at.desc())
            .limit(limit)
            .all()
        )

        return [
            UserResult(
                quiz_id=row.quiz_id,
                title=row.title,
                total_answers=row.total_answers,
                correct_answers=row.correct_answers or 0,
                last_taken_at=row.last_taken_at,
            )
            for row in rows
        ]

    def seed_example_quiz(self, db: Session) -> Optional[int]:
        """Create the example quiz if the store is empty"""
        if self.count_quizzes(db) > 0:
            return None

        return self.create_quiz(db, EXAMPLE_QUIZ_TITLE, SYSTEM_CREATOR, EXAMPLE_QUESTIONS)


# Global instance
quiz_store = QuizStore()
