"""
Request models for the HTTP endpoints.

Validation failures here surface as 400 responses before any prompt is
built. Arabic-text fields must contain Arabic script.
"""

from typing import Any, Optional

from pydantic import EmailStr, Field, field_validator

from arabic_grammar_gateway.models.base import CamelModel
from arabic_grammar_gateway.models.enums import ExerciseType, GrammarConceptType
from arabic_grammar_gateway.text_utils import is_valid_arabic


def _require_arabic(value: str) -> str:
    if not is_valid_arabic(value):
        raise ValueError("Please provide valid Arabic text.")
    return value


class AnalyzeTextRequest(CamelModel):
    arabic_text: str = Field(..., max_length=5000)

    @field_validator("arabic_text")
    @classmethod
    def arabic_only(cls, value: str) -> str:
        return _require_arabic(value)


class ExplainAnalysisRequest(CamelModel):
    """Explain a previous analysis result in Arabic."""

    analysis_result: dict[str, Any]
    arabic_text: str = Field(..., min_length=1, max_length=5000)


class GenerateExercisesRequest(CamelModel):
    difficulty: str = Field(..., min_length=1, max_length=50)
    exercise_type: ExerciseType
    count: int = Field(..., ge=1, le=10)


class CheckAnswerRequest(CamelModel):
    exercise_id: str = Field(..., min_length=1)
    exercise_text: str = Field(..., min_length=1)
    user_answer: str
    correct_answer: str = Field(..., min_length=1)
    exercise_type: str = Field(..., min_length=1)

    @field_validator("user_answer")
    @classmethod
    def answer_in_arabic(cls, value: str) -> str:
        # Empty answer is allowed (user skipped); anything else must be Arabic
        if value != "" and not is_valid_arabic(value):
            raise ValueError("Please enter your answer in Arabic.")
        return value


class GenerateQuizRequest(CamelModel):
    topic: str = Field(..., min_length=1, max_length=200)
    difficulty: str = Field(..., min_length=1, max_length=50)
    question_count: int = Field(..., ge=1, le=15)


class EvaluateQuizAnswerRequest(CamelModel):
    question_id: str = Field(..., min_length=1)
    user_answer_index: int = Field(..., ge=0, le=3)
    correct_answer_index: int = Field(..., ge=0, le=3)
    explanation: Optional[str] = None


class ConceptExplanationRequest(CamelModel):
    concept_type: GrammarConceptType
    concept_name: str = Field(..., min_length=1, max_length=200)


class RelatedConceptsRequest(ConceptExplanationRequest):
    count: int = Field(default=3, ge=1, le=5)


# === Auth ===


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    display_name: Optional[str] = Field(default=None, max_length=100)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
