"""Grammar concept lookup: explanations, related concepts, vocabularies."""

import structlog

from arabic_grammar_gateway.llm.prompt_builder import PromptBuilder
from arabic_grammar_gateway.models.enums import CONCEPT_VALUES, GrammarConceptType
from arabic_grammar_gateway.models.input_models import (
    ConceptExplanationRequest,
    RelatedConceptsRequest,
)
from arabic_grammar_gateway.models.output_models import (
    ConceptTypesResponse,
    ConceptValuesResponse,
    GrammarConcept,
    RelatedConcepts,
)
from arabic_grammar_gateway.schemas import (
    GRAMMAR_CONCEPT_REPAIRER,
    GRAMMAR_CONCEPT_SCHEMA,
    RELATED_CONCEPTS_REPAIRER,
    RELATED_CONCEPTS_SCHEMA,
)
from arabic_grammar_gateway.validation.pipeline import GenerationPipeline

logger = structlog.get_logger(__name__)


class ConceptService:
    def __init__(self, pipeline: GenerationPipeline, prompts: PromptBuilder):
        self.pipeline = pipeline
        self.prompts = prompts

    async def explanation(self, request: ConceptExplanationRequest) -> GrammarConcept:
        """
        Explain one concept with examples, tips and related concepts.

        Concept types the model gets wrong are repaired through the concept
        synonym table; unknown ones fall back to the requested type.
        """
        prompt = self.prompts.render(
            "concept_explanation",
            concept_type=request.concept_type.value,
            concept_name=request.concept_name,
            concept_types=GrammarConceptType.values(),
        )
        return await self.pipeline.run_structured(
            prompt,
            GRAMMAR_CONCEPT_SCHEMA,
            repairer=GRAMMAR_CONCEPT_REPAIRER,
            repair_default=request.concept_type.value,
        )

    async def related(self, request: RelatedConceptsRequest) -> RelatedConcepts:
        prompt = self.prompts.render(
            "related_concepts",
            count=request.count,
            concept_type=request.concept_type.value,
            concept_name=request.concept_name,
            concept_types=GrammarConceptType.values(),
        )
        result = await self.pipeline.run_structured(
            prompt,
            RELATED_CONCEPTS_SCHEMA,
            repairer=RELATED_CONCEPTS_REPAIRER,
            repair_default=request.concept_type.value,
        )
        logger.info(
            "Related concepts generated",
            concept_type=request.concept_type.value,
            requested=request.count,
            actual=len(result.related_concepts),
        )
        return result

    @staticmethod
    def concept_types() -> ConceptTypesResponse:
        return ConceptTypesResponse(concept_types=list(GrammarConceptType))

    @staticmethod
    def concept_values(concept_type: GrammarConceptType) -> ConceptValuesResponse:
        return ConceptValuesResponse(
            concept_type=concept_type,
            values=list(CONCEPT_VALUES[concept_type]),
        )
