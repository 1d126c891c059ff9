"""
Per-endpoint schema descriptors and shape-repair configuration.

Descriptors are built once at import time and shared read-only. Synonym
tables are versioned data: add an entry and bump the version when a new
drift class shows up in model output.
"""

from arabic_grammar_gateway.models.enums import ExerciseType, GrammarConceptType
from arabic_grammar_gateway.models.output_models import (
    AnswerEvaluation,
    ExerciseSet,
    Explanation,
    GrammarConcept,
    IrabExplanation,
    Quiz,
    RelatedConcepts,
    SyntaxNode,
    TextAnalysis,
)
from arabic_grammar_gateway.validation.repair import RepairRule, ShapeRepairer, SynonymTable
from arabic_grammar_gateway.validation.schema import RecursiveField, SchemaDescriptor

# === Schema descriptors ===

TEXT_ANALYSIS_SCHEMA = SchemaDescriptor.from_model(
    "text_analysis",
    TextAnalysis,
    tree=RecursiveField(root="syntaxTree", node_model=SyntaxNode),
)
EXPLANATION_SCHEMA = SchemaDescriptor.from_model("analysis_explanation", Explanation)
IRAB_SCHEMA = SchemaDescriptor.from_model("irab_explanation", IrabExplanation)
EXERCISE_SET_SCHEMA = SchemaDescriptor.from_model("exercise_set", ExerciseSet)
ANSWER_EVALUATION_SCHEMA = SchemaDescriptor.from_model("answer_evaluation", AnswerEvaluation)
QUIZ_SCHEMA = SchemaDescriptor.from_model("quiz", Quiz)
GRAMMAR_CONCEPT_SCHEMA = SchemaDescriptor.from_model("grammar_concept", GrammarConcept)
RELATED_CONCEPTS_SCHEMA = SchemaDescriptor.from_model("related_concepts", RelatedConcepts)

# === Synonym tables ===

CONCEPT_TYPE_SYNONYMS = SynonymTable(
    domain="grammar_concept_type",
    version="2",
    mapping={
        "grammatical_case": "case",
        "حالة إعرابية": "case",
        "علامة إعرابية": "case",
        "الإعراب": "case",
        "verb_tense": "tense",
        "زمن الفعل": "tense",
        "noun_state": "state",
        "البناء والإعراب": "state",
        "verbal_noun": "derivative",
        "المشتقات": "derivative",
        "sentence_structure": "sentence_type",
        "نوع الجملة": "sentence_type",
        "pos": "part_of_speech",
        "أقسام الكلام": "part_of_speech",
        "grammatical_gender": "gender",
        "grammatical_number": "number",
        "verb_mood": "mood",
        "verb_voice": "voice",
        "verb_pattern": "verb_form",
        "أوزان الفعل": "verb_form",
    },
)

EXERCISE_TYPE_SYNONYMS = SynonymTable(
    domain="exercise_type",
    version="1",
    mapping={
        "mcq": "multiple-choice",
        "multiple_choice_question": "multiple-choice",
        "fill_in_the_blank": "fill-in-blanks",
        "fill_in_the_blanks": "fill-in-blanks",
        "fill_in_blank": "fill-in-blanks",
        "error_correcting": "error-correction",
        "إعراب": "parsing",
        "اختيار من متعدد": "multiple-choice",
    },
)

CONCEPT_TYPES = frozenset(GrammarConceptType.values())
EXERCISE_TYPES = frozenset(ExerciseType.values())

# === Repairers ===

GRAMMAR_CONCEPT_REPAIRER = ShapeRepairer(
    [
        RepairRule("type", CONCEPT_TYPES, CONCEPT_TYPE_SYNONYMS),
        RepairRule("relatedConcepts[].type", CONCEPT_TYPES, CONCEPT_TYPE_SYNONYMS),
    ]
)

RELATED_CONCEPTS_REPAIRER = ShapeRepairer(
    [RepairRule("relatedConcepts[].type", CONCEPT_TYPES, CONCEPT_TYPE_SYNONYMS)]
)

EXERCISE_REPAIRER = ShapeRepairer(
    [RepairRule("exercises[].type", EXERCISE_TYPES, EXERCISE_TYPE_SYNONYMS)]
)
