"""
Pydantic data models.

Includes:
- Enums (GrammarConceptType, ExerciseType) and per-type concept values
- Output models: generated payload shapes validated by the pipeline, plus
  the response envelopes the API returns
- Input models: request bodies
"""

from arabic_grammar_gateway.models.enums import CONCEPT_VALUES, ExerciseType, GrammarConceptType
from arabic_grammar_gateway.models.input_models import (
    AnalyzeTextRequest,
    CheckAnswerRequest,
    ConceptExplanationRequest,
    EvaluateQuizAnswerRequest,
    ExplainAnalysisRequest,
    GenerateExercisesRequest,
    GenerateQuizRequest,
    LoginRequest,
    RegisterRequest,
    RelatedConceptsRequest,
)
from arabic_grammar_gateway.models.output_models import (
    AnswerEvaluation,
    ConceptTypesResponse,
    ConceptValuesResponse,
    Exercise,
    ExerciseItem,
    ExerciseSet,
    ExercisesResponse,
    Explanation,
    ExtendedRelatedConcept,
    GrammarConcept,
    GrammarExample,
    IrabExplanation,
    Quiz,
    QuizAnswerResult,
    QuizItem,
    QuizMetadata,
    QuizQuestion,
    QuizResponse,
    RelatedConcept,
    RelatedConcepts,
    SyntaxNode,
    TextAnalysis,
    TokenAnalysis,
)

__all__ = [
    # Enums
    "CONCEPT_VALUES",
    "ExerciseType",
    "GrammarConceptType",
    # Input models
    "AnalyzeTextRequest",
    "CheckAnswerRequest",
    "ConceptExplanationRequest",
    "EvaluateQuizAnswerRequest",
    "ExplainAnalysisRequest",
    "GenerateExercisesRequest",
    "GenerateQuizRequest",
    "LoginRequest",
    "RegisterRequest",
    "RelatedConceptsRequest",
    # Generated payloads
    "AnswerEvaluation",
    "Exercise",
    "ExerciseSet",
    "Explanation",
    "ExtendedRelatedConcept",
    "GrammarConcept",
    "GrammarExample",
    "IrabExplanation",
    "Quiz",
    "QuizQuestion",
    "RelatedConcept",
    "RelatedConcepts",
    "SyntaxNode",
    "TextAnalysis",
    "TokenAnalysis",
    # Response envelopes
    "ConceptTypesResponse",
    "ConceptValuesResponse",
    "ExerciseItem",
    "ExercisesResponse",
    "QuizAnswerResult",
    "QuizItem",
    "QuizMetadata",
    "QuizResponse",
]
