"""
Pydantic schemas for quiz-related requests and responses
"""
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional
from datetime import datetime


class QuestionCreate(BaseModel):
    """A fully entered question, ready to be stored"""
    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=2)
    correct_option: int = Field(..., ge=0, description="Zero-based index into options")

    @model_validator(mode="after")
    def check_correct_option(self):
        if self.correct_option >= len(self.options):
            raise ValueError(
                f"correct_option {self.correct_option} is out of range for {len(self.options)} options"
            )
        return self


class QuizOut(BaseModel):
    """Quiz summary as served to the Web App"""
    id: int
    title: str
    created_by: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class QuestionOut(BaseModel):
    """Question with its options"""
    id: int
    text: str
    options: List[str]
    correct_option: int

    model_config = ConfigDict(from_attributes=True)


class QuizListResponse(BaseModel):
    """Response for the quiz list"""
    quizzes: List[QuizOut]


class QuizDetailResponse(BaseModel):
    """Response for a single quiz with its questions"""
    quiz: QuizOut
    questions: List[QuestionOut]


class ErrorResponse(BaseModel):
    """Error body returned by the HTTP surface"""
    error: str
