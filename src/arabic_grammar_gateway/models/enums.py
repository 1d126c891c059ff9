"""
Closed vocabularies for the Arabic grammar domain.

Any value outside these sets is rejected by the schema validator (after the
shape repairer has had its chance).
"""

from enum import Enum


class GrammarConceptType(str, Enum):
    """Grammar concept categories."""

    PART_OF_SPEECH = "part_of_speech"
    CASE = "case"
    TENSE = "tense"
    VOICE = "voice"
    MOOD = "mood"
    GENDER = "gender"
    NUMBER = "number"
    STATE = "state"
    NOUN_TYPE = "noun_type"
    VERB_FORM = "verb_form"
    SENTENCE_TYPE = "sentence_type"
    DERIVATIVE = "derivative"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class ExerciseType(str, Enum):
    """Exercise formats the generator may produce."""

    PARSING = "parsing"
    FILL_IN_BLANKS = "fill-in-blanks"
    ERROR_CORRECTION = "error-correction"
    MULTIPLE_CHOICE = "multiple-choice"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


# Allowed values per concept type
CONCEPT_VALUES: dict[GrammarConceptType, tuple[str, ...]] = {
    GrammarConceptType.TENSE: (
        "past", "present", "future", "perfect", "continuous", "imperative",
    ),
    GrammarConceptType.PART_OF_SPEECH: (
        "verb", "subject", "predicate", "noun", "adjective", "adverb",
        "preposition", "pronoun", "conjunction",
    ),
    GrammarConceptType.CASE: ("nominative", "accusative", "genitive", "jussive"),
    GrammarConceptType.NOUN_TYPE: (
        "definite", "indefinite", "proper", "common", "collective", "abstract",
    ),
    GrammarConceptType.NUMBER: (
        "singular", "dual", "plural", "sound plural", "broken plural",
    ),
    GrammarConceptType.VERB_FORM: (
        "form I", "form II", "form III", "form IV", "form V",
        "form VI", "form VII", "form VIII", "form IX", "form X",
    ),
    GrammarConceptType.SENTENCE_TYPE: (
        "nominal", "verbal", "conditional", "interrogative", "negative",
    ),
    GrammarConceptType.GENDER: ("masculine", "feminine"),
    GrammarConceptType.DERIVATIVE: (
        "verbal noun", "active participle", "passive participle",
        "comparative", "place noun", "time noun", "tool noun",
    ),
    GrammarConceptType.VOICE: ("active", "passive"),
    GrammarConceptType.MOOD: ("indicative", "subjunctive", "jussive", "imperative"),
    GrammarConceptType.STATE: ("declined", "indeclinable"),
}
