"""
Pydantic schemas for data sent from the Telegram Web App
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal


class SubmittedAnswer(BaseModel):
    """Single answer chosen in the Web App"""
    model_config = ConfigDict(populate_by_name=True)

    question_id: int = Field(..., alias="questionId")
    selected_option: int = Field(..., alias="selectedOption", ge=0)


class QuizResultPayload(BaseModel):
    """Payload posted via Telegram.WebApp.sendData() when a quiz is completed"""
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["quiz_result"]
    quiz_id: int = Field(..., alias="quizId")
    answers: List[SubmittedAnswer]


class GradedAnswer(BaseModel):
    """Submitted answer with correctness resolved against the stored question"""
    question_id: int
    selected_option: int
    correct: bool


class SubmissionResult(BaseModel):
    """Outcome of recording a submission"""
    quiz_id: int
    correct_count: int
    total_count: int
