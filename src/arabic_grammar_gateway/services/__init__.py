"""
Endpoint services: render the prompt, run the pipeline, shape the response.

Each service is a thin composition of a ``PromptBuilder`` and a
``GenerationPipeline``; neither HTTP nor auth leaks in here.
"""

from arabic_grammar_gateway.services.analysis import AnalysisService
from arabic_grammar_gateway.services.concepts import ConceptService
from arabic_grammar_gateway.services.exercises import ExerciseService
from arabic_grammar_gateway.services.quiz import QuizService

__all__ = ["AnalysisService", "ConceptService", "ExerciseService", "QuizService"]
