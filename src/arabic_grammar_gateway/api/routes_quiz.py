"""Quiz routes."""

from fastapi import APIRouter, Depends

from arabic_grammar_gateway.api.dependencies import get_current_user, get_quiz_service
from arabic_grammar_gateway.api.routes_analysis import PIPELINE_ERRORS
from arabic_grammar_gateway.models.input_models import EvaluateQuizAnswerRequest, GenerateQuizRequest
from arabic_grammar_gateway.models.output_models import QuizAnswerResult, QuizResponse
from arabic_grammar_gateway.services.quiz import QuizService

router = APIRouter(
    prefix="/api/quiz",
    tags=["quiz"],
    dependencies=[Depends(get_current_user)],
)


@router.post(
    "/generate",
    response_model=QuizResponse,
    summary="Generate a multiple-choice quiz",
    responses=PIPELINE_ERRORS,
)
async def generate_quiz(
    request: GenerateQuizRequest,
    service: QuizService = Depends(get_quiz_service),
) -> QuizResponse:
    return await service.generate(request)


@router.post(
    "/evaluate",
    response_model=QuizAnswerResult,
    summary="Evaluate a quiz answer locally",
)
async def evaluate_quiz_answer(
    request: EvaluateQuizAnswerRequest,
    service: QuizService = Depends(get_quiz_service),
) -> QuizAnswerResult:
    return service.evaluate(request)
