"""
Tests for the quiz store.
"""

from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from quizbot.database import init_db
from quizbot.models import Answer, Question, Quiz
from quizbot.schemas.quiz import QuestionCreate
from quizbot.schemas.webapp import GradedAnswer
from quizbot.services.quiz_store import EXAMPLE_QUIZ_TITLE, SYSTEM_CREATOR, quiz_store


def make_questions():
    return [
        QuestionCreate(text="2 + 2?", options=["3", "4", "5"], correct_option=1),
        QuestionCreate(text="Capital of Italy?", options=["Rome", "Milan"], correct_option=0),
    ]


class TestCreateAndFetch:
    """Tests for creating and reading quizzes."""

    def test_create_returns_id(self, db):
        quiz_id = quiz_store.create_quiz(db, "Basics", "42", make_questions())

        assert isinstance(quiz_id, int)
        assert quiz_store.count_quizzes(db) == 1

    def test_fetch_with_questions(self, db):
        quiz_id = quiz_store.create_quiz(db, "Basics", "42", make_questions())

        quiz, questions = quiz_store.get_quiz_with_questions(db, quiz_id)

        assert quiz.title == "Basics"
        assert quiz.created_by == "42"
        assert quiz.created_at is not None
        assert [q.text for q in questions] == ["2 + 2?", "Capital of Italy?"]
        assert questions[0].options == ["3", "4", "5"]
        assert questions[0].correct_option == 1
        assert questions[0].id < questions[1].id

    def test_fetch_missing(self, db):
        assert quiz_store.get_quiz_with_questions(db, 12345) is None

    def test_list_newest_first(self, db):
        older = quiz_store.create_quiz(db, "Older", "42", make_questions())
        newer = quiz_store.create_quiz(db, "Newer", "42", make_questions())
        db.query(Quiz).filter(Quiz.id == older).update({"created_at": datetime(2024, 1, 1)})
        db.query(Quiz).filter(Quiz.id == newer).update({"created_at": datetime(2024, 6, 1)})
        db.commit()

        quizzes = quiz_store.list_quizzes(db)

        assert [q.title for q in quizzes] == ["Newer", "Older"]

    def test_list_empty(self, db):
        assert quiz_store.list_quizzes(db) == []


class TestAtomicity:
    """Multi-row writes are all-or-nothing."""

    def test_create_quiz_rolls_back_on_failing_last_question(self, db):
        broken = QuestionCreate.model_construct(text=None, options=["a", "b"], correct_option=0)

        with pytest.raises(IntegrityError):
            quiz_store.create_quiz(db, "Broken", "42", [make_questions()[0], broken])

        assert db.query(Quiz).count() == 0
        assert db.query(Question).count() == 0

    def test_save_answers_rolls_back_on_failing_last_answer(self, db):
        quiz_id = quiz_store.create_quiz(db, "Basics", "42", make_questions())
        _, questions = quiz_store.get_quiz_with_questions(db, quiz_id)

        answers = [
            GradedAnswer(question_id=questions[0].id, selected_option=1, correct=True),
            GradedAnswer(question_id=999999, selected_option=0, correct=False),
        ]

        with pytest.raises(IntegrityError):
            quiz_store.save_answers(db, "7", quiz_id, answers)

        assert db.query(Answer).count() == 0

    def test_session_usable_after_rollback(self, db):
        broken = QuestionCreate.model_construct(text=None, options=["a", "b"], correct_option=0)
        with pytest.raises(IntegrityError):
            quiz_store.create_quiz(db, "Broken", "42", [broken])

        quiz_id = quiz_store.create_quiz(db, "Fine", "42", make_questions())

        assert quiz_store.get_quiz_with_questions(db, quiz_id) is not None


class TestUserResults:
    """Tests for per-user result aggregation."""

    def add_answer(self, db, user_id, quiz_id, question_id, correct, timestamp):
        db.add(Answer(
            user_id=user_id,
            quiz_id=quiz_id,
            question_id=question_id,
            selected_option=0,
            correct=correct,
            timestamp=timestamp,
        ))

    def test_no_answers(self, db):
        assert quiz_store.get_user_results(db, "nobody", 10) == []

    def test_aggregates_per_quiz(self, db):
        first = quiz_store.create_quiz(db, "First", "42", make_questions())
        second = quiz_store.create_quiz(db, "Second", "42", make_questions())
        _, q1 = quiz_store.get_quiz_with_questions(db, first)
        _, q2 = quiz_store.get_quiz_with_questions(db, second)

        self.add_answer(db, "7", first, q1[0].id, True, datetime(2024, 3, 1, 10, 0))
        self.add_answer(db, "7", first, q1[1].id, False, datetime(2024, 3, 1, 10, 5))
        self.add_answer(db, "7", second, q2[0].id, True, datetime(2024, 3, 2, 9, 0))
        self.add_answer(db, "8", second, q2[1].id, True, datetime(2024, 3, 3, 9, 0))
        db.commit()

        results = quiz_store.get_user_results(db, "7", 10)

        assert [r.title for r in results] == ["Second", "First"]
        assert (results[1].total_answers, results[1].correct_answers) == (2, 1)
        assert (results[0].total_answers, results[0].correct_answers) == (1, 1)
        assert results[1].last_taken_at == datetime(2024, 3, 1, 10, 5)

    def test_limit(self, db):
        for day in range(1, 4):
            quiz_id = quiz_store.create_quiz(db, f"Quiz {day}", "42", make_questions())
            _, questions = quiz_store.get_quiz_with_questions(db, quiz_id)
            self.add_answer(db, "7", quiz_id, questions[0].id, True, datetime(2024, 3, day))
        db.commit()

        results = quiz_store.get_user_results(db, "7", 2)

        assert [r.title for r in results] == ["Quiz 3", "Quiz 2"]


class TestCascade:
    """Questions and answers go with their quiz."""

    def test_delete_quiz(self, db):
        quiz_id = quiz_store.create_quiz(db, "Basics", "42", make_questions())
        quiz, questions = quiz_store.get_quiz_with_questions(db, quiz_id)
        quiz_store.save_answers(db, "7", quiz_id, [
            GradedAnswer(question_id=questions[0].id, selected_option=1, correct=True),
        ])

        db.delete(quiz)
        db.commit()

        assert db.query(Question).count() == 0
        assert db.query(Answer).count() == 0


class TestSeeding:
    """Tests for the example quiz."""

    def test_seed_into_empty_store(self, db):
        quiz_id = quiz_store.seed_example_quiz(db)

        quiz, questions = quiz_store.get_quiz_with_questions(db, quiz_id)
        assert quiz.title == EXAMPLE_QUIZ_TITLE
        assert quiz.created_by == SYSTEM_CREATOR
        assert len(questions) == 2

    def test_seed_skipped_when_quizzes_exist(self, db):
        quiz_store.create_quiz(db, "Mine", "42", make_questions())

        assert quiz_store.seed_example_quiz(db) is None
        assert quiz_store.count_quizzes(db) == 1

    def test_init_db_is_idempotent(self, engine, session_factory, db):
        init_db(bind=engine, session_factory=session_factory)
        init_db(bind=engine, session_factory=session_factory)

        assert quiz_store.count_quizzes(db) == 1
