"""
Output data models.

Two groups:
- Generated payloads: the shapes the model must produce. Their JSON Schemas
  (camelCase aliases) drive the schema validator, so ranges and closed sets
  declared here are enforced on raw model output.
- Response envelopes: what the API returns after the service layer has
  added ids and metadata.
"""

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import Field, field_validator

from arabic_grammar_gateway.models.base import CamelModel
from arabic_grammar_gateway.models.enums import ExerciseType, GrammarConceptType

IRAB_MARKERS = ("الجملة الأصلية:", "الإعراب:")

NonNegativeIndex = Annotated[int, Field(ge=0)]


# === Analysis ===


class TokenAnalysis(CamelModel):
    """Morphological analysis of one token."""

    surface: str
    diacritized: str
    root: str
    pattern: str
    pos: str = Field(..., description="Part of speech (noun, verb, particle, ...)")
    features: dict[str, Any] = Field(
        default_factory=dict,
        description="Features depending on part of speech (gender, case, tense, ...)",
    )


class SyntaxNode(CamelModel):
    """
    One node of the syntax tree. ``children`` nest to any depth.
    """

    type: str = Field(..., description="sentence, clause, phrase, ...")
    role: str = Field(..., description="subject, predicate, object, ...")
    token_indices: Optional[list[NonNegativeIndex]] = None
    children: Optional[list["SyntaxNode"]] = None


class TextAnalysis(CamelModel):
    """Result of /api/analysis/analyze."""

    tokens: list[TokenAnalysis]
    syntax_tree: Optional[SyntaxNode] = None


class Explanation(CamelModel):
    """Free-text explanation of an analysis."""

    explanation: str = Field(..., min_length=1)


class IrabExplanation(CamelModel):
    """I'rab text; must follow the "original sentence / i'rab" layout."""

    explanation: str = Field(
        ...,
        min_length=1,
        json_schema_extra={"allOf": [{"pattern": marker} for marker in IRAB_MARKERS]},
    )

    @field_validator("explanation")
    @classmethod
    def require_markers(cls, value: str) -> str:
        missing = [marker for marker in IRAB_MARKERS if marker not in value]
        if missing:
            raise ValueError(f"missing required sections: {', '.join(missing)}")
        return value


# === Exercises ===


class Exercise(CamelModel):
    """A generated exercise. ``id`` is replaced by the service."""

    id: Optional[str] = None
    text: str
    question: str
    type: ExerciseType
    options: Optional[list[str]] = None
    hint: Optional[str] = None
    correct_answer: str
    explanation: str


class ExerciseSet(CamelModel):
    exercises: list[Exercise] = Field(..., min_length=1)


class AnswerEvaluation(CamelModel):
    """Model feedback on a user's exercise answer."""

    is_correct: bool
    score: float = Field(..., ge=0, le=100)
    feedback: str
    correct_answer: str
    explanation: str


# === Quiz ===


class QuizQuestion(CamelModel):
    """A multiple-choice question with exactly four options."""

    id: Optional[str] = None
    question_text: str
    options: list[str] = Field(..., min_length=4, max_length=4)
    correct_answer_index: int = Field(..., ge=0, le=3)
    explanation: str


class Quiz(CamelModel):
    quiz: list[QuizQuestion] = Field(..., min_length=1)


# === Grammar concepts ===


class GrammarExample(CamelModel):
    arabic_text: str
    translation: str
    explanation: str


class RelatedConcept(CamelModel):
    type: GrammarConceptType
    name: str


class ExtendedRelatedConcept(RelatedConcept):
    name_arabic: str
    brief_description: str
    color: Optional[str] = None


class GrammarConcept(CamelModel):
    """Full explanation of one grammar concept."""

    type: GrammarConceptType
    name: str
    name_arabic: str
    color: Optional[str] = None
    description: str
    examples: list[GrammarExample]
    tips: list[str]
    related_concepts: list[RelatedConcept]


class RelatedConcepts(CamelModel):
    related_concepts: list[ExtendedRelatedConcept]


# === Response envelopes ===


class ExerciseItem(Exercise):
    id: str


class ExercisesResponse(CamelModel):
    exercises: list[ExerciseItem]


class QuizItem(QuizQuestion):
    id: str
    topic: str
    difficulty: str


class QuizMetadata(CamelModel):
    generated_at: datetime
    requested_count: int
    actual_count: int
    topic: str
    difficulty: str


class QuizResponse(CamelModel):
    quiz: list[QuizItem]
    metadata: QuizMetadata


class QuizAnswerResult(CamelModel):
    """Local (no model call) evaluation of a quiz answer."""

    question_id: str
    is_correct: bool
    score: int
    feedback: str
    user_answer_index: int
    correct_answer_index: int


class ConceptTypesResponse(CamelModel):
    concept_types: list[GrammarConceptType]


class ConceptValuesResponse(CamelModel):
    concept_type: GrammarConceptType
    values: list[str]
