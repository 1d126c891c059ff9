"""Exercise generation and AI-assisted answer checking."""

import uuid

import structlog

from arabic_grammar_gateway.llm.prompt_builder import PromptBuilder
from arabic_grammar_gateway.models.enums import ExerciseType
from arabic_grammar_gateway.models.input_models import CheckAnswerRequest, GenerateExercisesRequest
from arabic_grammar_gateway.models.output_models import (
    AnswerEvaluation,
    ExerciseItem,
    ExercisesResponse,
)
from arabic_grammar_gateway.schemas import (
    ANSWER_EVALUATION_SCHEMA,
    EXERCISE_REPAIRER,
    EXERCISE_SET_SCHEMA,
)
from arabic_grammar_gateway.validation.pipeline import GenerationPipeline

logger = structlog.get_logger(__name__)


class ExerciseService:
    def __init__(self, pipeline: GenerationPipeline, prompts: PromptBuilder):
        self.pipeline = pipeline
        self.prompts = prompts

    async def generate(self, request: GenerateExercisesRequest) -> ExercisesResponse:
        """
        Generate ``request.count`` exercises of the requested type.

        Placeholder ids from the model are replaced with UUIDs and every
        exercise is stamped with the requested type.
        """
        logger.info(
            "Generating exercises",
            count=request.count,
            exercise_type=request.exercise_type.value,
            difficulty=request.difficulty,
        )
        prompt = self.prompts.render(
            "generate_exercises",
            count=request.count,
            difficulty=request.difficulty,
            exercise_type=request.exercise_type.value,
            exercise_types=ExerciseType.values(),
        )
        exercise_set = await self.pipeline.run_structured(
            prompt,
            EXERCISE_SET_SCHEMA,
            repairer=EXERCISE_REPAIRER,
            repair_default=request.exercise_type.value,
        )

        exercises = [
            ExerciseItem.model_validate(
                {
                    **exercise.model_dump(),
                    "id": str(uuid.uuid4()),
                    "type": request.exercise_type,
                }
            )
            for exercise in exercise_set.exercises
        ]
        logger.info("Exercises generated", requested=request.count, actual=len(exercises))
        return ExercisesResponse(exercises=exercises)

    async def check(self, request: CheckAnswerRequest) -> AnswerEvaluation:
        prompt = self.prompts.render(
            "check_answer",
            exercise_type=request.exercise_type,
            exercise_text=request.exercise_text,
            correct_answer=request.correct_answer,
            user_answer=request.user_answer,
        )
        evaluation = await self.pipeline.run_structured(prompt, ANSWER_EVALUATION_SCHEMA)
        logger.info(
            "Answer checked",
            exercise_id=request.exercise_id,
            is_correct=evaluation.is_correct,
            score=evaluation.score,
        )
        return evaluation
