"""
Grading of quiz results submitted from the Web App
Exact match of the selected option against the stored correct option
"""
import json
import logging
from typing import List, Optional, Sequence
from pydantic import ValidationError
from sqlalchemy.orm import Session

from quizbot.models import Question
from quizbot.schemas.webapp import (
    GradedAnswer,
    QuizResultPayload,
    SubmissionResult,
    SubmittedAnswer,
)
from quizbot.services.quiz_store import quiz_store

logger = logging.getLogger(__name__)

QUIZ_RESULT_TYPE = "quiz_result"


def parse_webapp_payload(raw: str) -> Optional[QuizResultPayload]:
    """
    Decode Web App data into a quiz result

    Anything that is not valid JSON, does not carry type "quiz_result",
    or has malformed fields is rejected.

    Returns:
        QuizResultPayload or None
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"Web App data is not JSON: {str(e)}")
        return None

    if not isinstance(data, dict) or data.get("type") != QUIZ_RESULT_TYPE:
        logger.warning(f"Ignoring Web App data of unknown type: {str(data)[:100]}")
        return None

    try:
        return QuizResultPayload.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Malformed quiz result payload: {e.error_count()} errors")
        return None


class GradingService:
    """Service for grading and recording Web App submissions"""

    def grade_answers(
        self,
        questions: Sequence[Question],
        answers: Sequence[SubmittedAnswer]
    ) -> List[GradedAnswer]:
        """
        Resolve correctness of each answer against the quiz questions

        Answers to questions that are not part of the quiz are dropped.
        """
        by_question_id = {question.id: question for question in questions}

        graded = []
        for answer in answers:
            question = by_question_id.get(answer.question_id)
            if question is None:
                logger.warning(f"Dropping answer to unknown question {answer.question_id}")
                continue

            graded.append(GradedAnswer(
                question_id=answer.question_id,
                selected_option=answer.selected_option,
                correct=answer.selected_option == question.correct_option,
            ))

        return graded

    def grade_submission(
        self,
        db: Session,
        user_id: str,
        payload: QuizResultPayload
    ) -> Optional[SubmissionResult]:
        """
        Grade a submission and store its answers

        Returns:
            SubmissionResult, or None if the quiz does not exist
        """
        found = quiz_store.get_quiz_with_questions(db, payload.quiz_id)
        if found is None:
            logger.info(f"Submission for missing quiz {payload.quiz_id} from user {user_id}")
            return None

        _, questions = found
        graded = self.grade_answers(questions, payload.answers)

        quiz_store.save_answers(db, user_id, payload.quiz_id, graded)

        correct_count = sum(1 for answer in graded if answer.correct)
        logger.info(
            f"Quiz {payload.quiz_id} graded for user {user_id}: "
            f"{correct_count}/{len(graded)}"
        )

        return SubmissionResult(
            quiz_id=payload.quiz_id,
            correct_count=correct_count,
            total_count=len(graded),
        )


# Global instance
grading_service = GradingService()
