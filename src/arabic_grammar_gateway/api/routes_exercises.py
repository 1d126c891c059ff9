"""Exercise routes."""

from fastapi import APIRouter, Depends

from arabic_grammar_gateway.api.dependencies import get_current_user, get_exercise_service
from arabic_grammar_gateway.api.routes_analysis import PIPELINE_ERRORS
from arabic_grammar_gateway.models.input_models import CheckAnswerRequest, GenerateExercisesRequest
from arabic_grammar_gateway.models.output_models import AnswerEvaluation, ExercisesResponse
from arabic_grammar_gateway.services.exercises import ExerciseService

router = APIRouter(
    prefix="/api/exercises",
    tags=["exercises"],
    dependencies=[Depends(get_current_user)],
)


@router.post(
    "/generate",
    response_model=ExercisesResponse,
    summary="Generate grammar exercises",
    description="""
    Generate `count` (1-10) exercises of one type. Each exercise gets a fresh
    UUID and is stamped with the requested type.
    """,
    responses=PIPELINE_ERRORS,
)
async def generate_exercises(
    request: GenerateExercisesRequest,
    service: ExerciseService = Depends(get_exercise_service),
) -> ExercisesResponse:
    return await service.generate(request)


@router.post(
    "/check",
    response_model=AnswerEvaluation,
    summary="Evaluate a user's answer with the AI",
    responses=PIPELINE_ERRORS,
)
async def check_answer(
    request: CheckAnswerRequest,
    service: ExerciseService = Depends(get_exercise_service),
) -> AnswerEvaluation:
    return await service.check(request)
