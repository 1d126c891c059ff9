"""Grammar concept routes."""

from fastapi import APIRouter, Depends

from arabic_grammar_gateway.api.dependencies import get_concept_service, get_current_user
from arabic_grammar_gateway.api.routes_analysis import PIPELINE_ERRORS
from arabic_grammar_gateway.models.enums import GrammarConceptType
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
from arabic_grammar_gateway.services.concepts import ConceptService

router = APIRouter(
    prefix="/api/grammar",
    tags=["grammar"],
    dependencies=[Depends(get_current_user)],
)


@router.post(
    "/explanation",
    response_model=GrammarConcept,
    summary="Explain a grammar concept",
    responses=PIPELINE_ERRORS,
)
async def concept_explanation(
    request: ConceptExplanationRequest,
    service: ConceptService = Depends(get_concept_service),
) -> GrammarConcept:
    return await service.explanation(request)


@router.post(
    "/related",
    response_model=RelatedConcepts,
    summary="List concepts related to a grammar concept",
    responses=PIPELINE_ERRORS,
)
async def related_concepts(
    request: RelatedConceptsRequest,
    service: ConceptService = Depends(get_concept_service),
) -> RelatedConcepts:
    return await service.related(request)


@router.get(
    "/concept-types",
    response_model=ConceptTypesResponse,
    summary="Closed vocabulary of concept types",
)
async def concept_types() -> ConceptTypesResponse:
    return ConceptService.concept_types()


@router.get(
    "/concept-values/{concept_type}",
    response_model=ConceptValuesResponse,
    summary="Allowed values for one concept type",
    responses={400: {"description": "Unknown concept type"}},
)
async def concept_values(concept_type: GrammarConceptType) -> ConceptValuesResponse:
    # Unknown types fail path validation -> 400 invalid_request
    return ConceptService.concept_values(concept_type)
