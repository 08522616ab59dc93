"""
Pydantic schemas for quiz questions and score submission
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List, Optional


class QuizQuestion(BaseModel):
    """Multiple-choice question as served to the client"""
    question: str
    correct_answer: str
    incorrect_answers: List[str]
    category: Optional[str] = None
    difficulty: Optional[str] = None


class QuizQuestionsResponse(BaseModel):
    """Batch of questions; source is live, cache, stale or fallback"""
    questions: List[QuizQuestion]
    source: str


class AnsweredQuestion(BaseModel):
    """Per-question detail optionally attached to a submission"""
    model_config = ConfigDict(populate_by_name=True)

    question_text: str = Field(..., alias="questionText")
    correct_answer: str = Field(..., alias="correctAnswer")
    user_answer: Optional[str] = Field(None, alias="userAnswer")
    is_correct: bool = Field(..., alias="isCorrect")


class QuizSubmission(BaseModel):
    """Schema for quiz submission"""
    model_config = ConfigDict(populate_by_name=True)

    category: str = Field(..., min_length=1)
    difficulty: str = Field(..., pattern="^(easy|medium|hard)$")
    question_count: int = Field(..., ge=1, alias="questionCount")
    correct_answers: int = Field(..., ge=0, alias="correctAnswers")
    questions: Optional[List[AnsweredQuestion]] = None

    @field_validator("category")
    @classmethod
    def category_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Category is required")
        return value

    @model_validator(mode="after")
    def correct_within_count(self):
        if self.correct_answers > self.question_count:
            raise ValueError("correctAnswers cannot exceed questionCount")
        return self


class SubmittedScore(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category: str
    difficulty: str
    question_count: int = Field(..., alias="questionCount")
    correct_answers: int = Field(..., alias="correctAnswers")
    percentage: int


class UpdatedStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mana: int
    mage_meter: int = Field(..., alias="mageMeter")


class QuizSubmitResponse(BaseModel):
    """Response after a score submission"""
    message: str
    user: UpdatedStats
    score: SubmittedScore
