"""Unit tests for request models."""

import pytest
from pydantic import ValidationError

from arabic_grammar_gateway.models.enums import ExerciseType, GrammarConceptType
from arabic_grammar_gateway.models.input_models import (
    AnalyzeTextRequest,
    CheckAnswerRequest,
    EvaluateQuizAnswerRequest,
    GenerateExercisesRequest,
    GenerateQuizRequest,
    RegisterRequest,
    RelatedConceptsRequest,
)


class TestAnalyzeTextRequest:
    """Test the Arabic-only input check."""

    def test_accepts_camel_case(self):
        """Test the wire format uses camelCase."""
        request = AnalyzeTextRequest.model_validate({"arabicText": "العلم نور"})
        assert request.arabic_text == "العلم نور"

    def test_rejects_latin(self):
        """Test non-Arabic text is refused."""
        with pytest.raises(ValidationError, match="valid Arabic text"):
            AnalyzeTextRequest.model_validate({"arabicText": "hello"})


class TestGenerateExercisesRequest:
    """Test exercise request bounds."""

    def test_valid(self):
        """Test a valid request parses the enum."""
        request = GenerateExercisesRequest.model_validate(
            {"difficulty": "beginner", "exerciseType": "fill-in-blanks", "count": 5}
        )
        assert request.exercise_type is ExerciseType.FILL_IN_BLANKS

    @pytest.mark.parametrize("count", [0, 11])
    def test_count_bounds(self, count):
        """Test count must be 1..10."""
        with pytest.raises(ValidationError):
            GenerateExercisesRequest.model_validate(
                {"difficulty": "beginner", "exerciseType": "parsing", "count": count}
            )

    def test_unknown_type(self):
        """Test exercise types are a closed set."""
        with pytest.raises(ValidationError):
            GenerateExercisesRequest.model_validate(
                {"difficulty": "beginner", "exerciseType": "essay", "count": 1}
            )


class TestCheckAnswerRequest:
    """Test the answer language check."""

    def base(self, answer: str) -> dict:
        return {
            "exerciseId": "e1",
            "exerciseText": "كتب الطالب",
            "userAnswer": answer,
            "correctAnswer": "فاعل",
            "exerciseType": "parsing",
        }

    def test_empty_answer_allowed(self):
        """Test a skipped answer is accepted."""
        assert CheckAnswerRequest.model_validate(self.base("")).user_answer == ""

    def test_latin_answer_rejected(self):
        """Test non-Arabic answers are refused."""
        with pytest.raises(ValidationError, match="Arabic"):
            CheckAnswerRequest.model_validate(self.base("subject"))


class TestQuizRequests:
    """Test quiz request bounds."""

    @pytest.mark.parametrize("count", [0, 16])
    def test_question_count_bounds(self, count):
        """Test questionCount must be 1..15."""
        with pytest.raises(ValidationError):
            GenerateQuizRequest.model_validate(
                {"topic": "الفاعل", "difficulty": "easy", "questionCount": count}
            )

    def test_answer_index_bounds(self):
        """Test indices must be 0..3."""
        with pytest.raises(ValidationError):
            EvaluateQuizAnswerRequest.model_validate(
                {"questionId": "q1", "userAnswerIndex": 4, "correctAnswerIndex": 0}
            )


class TestRelatedConceptsRequest:
    """Test defaults."""

    def test_default_count(self):
        """Test count defaults to 3."""
        request = RelatedConceptsRequest.model_validate(
            {"conceptType": "tense", "conceptName": "past"}
        )
        assert request.count == 3
        assert request.concept_type is GrammarConceptType.TENSE


class TestRegisterRequest:
    """Test registration input."""

    def test_short_password(self):
        """Test passwords need at least 6 characters."""
        with pytest.raises(ValidationError):
            RegisterRequest.model_validate({"email": "a@example.com", "password": "12345"})

    def test_invalid_email(self):
        """Test malformed emails are refused."""
        with pytest.raises(ValidationError):
            RegisterRequest.model_validate({"email": "not-an-email", "password": "secret123"})
