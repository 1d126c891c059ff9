"""Grammar analysis routes."""

from fastapi import APIRouter, Depends

from arabic_grammar_gateway.api.dependencies import get_analysis_service, get_current_user
from arabic_grammar_gateway.models.input_models import AnalyzeTextRequest, ExplainAnalysisRequest
from arabic_grammar_gateway.models.output_models import Explanation, IrabExplanation, TextAnalysis
from arabic_grammar_gateway.services.analysis import AnalysisService

router = APIRouter(
    prefix="/api/analysis",
    tags=["analysis"],
    dependencies=[Depends(get_current_user)],
)

PIPELINE_ERRORS = {
    400: {"description": "Invalid request (e.g. text is not Arabic)"},
    502: {"description": "AI response failed format or schema validation"},
    503: {"description": "AI service unavailable after retries"},
}


@router.post(
    "/analyze",
    response_model=TextAnalysis,
    summary="Structured morphological and syntactic analysis",
    responses=PIPELINE_ERRORS,
)
async def analyze_text(
    request: AnalyzeTextRequest,
    service: AnalysisService = Depends(get_analysis_service),
) -> TextAnalysis:
    return await service.analyze(request)


@router.post(
    "/analyze/text",
    response_model=IrabExplanation,
    summary="Word-by-word i'rab as text",
    responses=PIPELINE_ERRORS,
)
async def analyze_text_irab(
    request: AnalyzeTextRequest,
    service: AnalysisService = Depends(get_analysis_service),
) -> IrabExplanation:
    return await service.irab(request)


@router.post(
    "/explain",
    response_model=Explanation,
    summary="Explain an analysis result in Arabic",
    responses=PIPELINE_ERRORS,
)
async def explain_analysis(
    request: ExplainAnalysisRequest,
    service: AnalysisService = Depends(get_analysis_service),
) -> Explanation:
    return await service.explain(request)
