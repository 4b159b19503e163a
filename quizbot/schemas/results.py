"""
Pydantic schemas for per-user results
"""
from pydantic import BaseModel
from datetime import datetime


class UserResult(BaseModel):
    """Aggregated answers of one user for one quiz"""
    quiz_id: int
    title: str
    total_answers: int
    correct_answers: int
    last_taken_at: datetime
