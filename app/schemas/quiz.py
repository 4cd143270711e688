import uuid
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class QuizOption(BaseModel):
    id: str
    text: str

class QuizQuestion(BaseModel):
    id: str
    question_text: str = Field(..., alias="questionText")
    options: List[QuizOption] = Field(..., min_length=2)
    correct_answer_id: str = Field(..., alias="correctAnswerId")
    explanation: Optional[str] = None
    shuffle_options: bool = Field(default=False, alias="shuffleOptions")

    model_config = ConfigDict(populate_by_name=True)

class QuizContent(BaseModel):
    title: Optional[str] = None
    questions: List[QuizQuestion] = Field(default_factory=list)

class VideoContent(BaseModel):
    url: str
    thumbnail: Optional[str] = None

class TextContent(BaseModel):
    html: str

class QuizAnswer(BaseModel):
    question_id: str = Field(..., alias="questionId")
    selected_option_id: str = Field(..., alias="selectedOptionId")

    model_config = ConfigDict(populate_by_name=True)

class SubmitQuizRequest(BaseModel):
    answers: List[QuizAnswer]

class QuestionEvaluationResult(BaseModel):
    question_id: str
    selected_option_id: Optional[str] = None
    is_correct: bool
    percentage: int
    explanation: Optional[str] = None

class EvaluationResult(BaseModel):
    questions: List[QuestionEvaluationResult]
    total_percentage: int
    correct_count: int
    total_questions: int

class QuizResult(BaseModel):
    submission_id: uuid.UUID
    lesson_item_id: uuid.UUID
    results: List[QuestionEvaluationResult]
    score: int
    correct_answers: int
    total_questions: int
    is_completed: bool
