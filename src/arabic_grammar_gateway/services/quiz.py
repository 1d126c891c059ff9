"""Quiz generation and local answer evaluation."""

import uuid
from datetime import datetime, timezone

import structlog

from arabic_grammar_gateway.llm.prompt_builder import PromptBuilder
from arabic_grammar_gateway.models.input_models import EvaluateQuizAnswerRequest, GenerateQuizRequest
from arabic_grammar_gateway.models.output_models import (
    QuizAnswerResult,
    QuizItem,
    QuizMetadata,
    QuizResponse,
)
from arabic_grammar_gateway.schemas import QUIZ_SCHEMA
from arabic_grammar_gateway.validation.pipeline import GenerationPipeline

logger = structlog.get_logger(__name__)

CORRECT_FEEDBACK = "إجابة صحيحة!"
INCORRECT_FEEDBACK = "إجابة خاطئة. الرجاء المحاولة مرة أخرى."


class QuizService:
    def __init__(self, pipeline: GenerationPipeline, prompts: PromptBuilder):
        self.pipeline = pipeline
        self.prompts = prompts

    async def generate(self, request: GenerateQuizRequest) -> QuizResponse:
        """
        Generate a multiple-choice quiz.

        Every question gets a fresh UUID plus the requested topic and
        difficulty; metadata reports requested vs. actual question count.
        """
        prompt = self.prompts.render(
            "generate_quiz",
            question_count=request.question_count,
            topic=request.topic,
            difficulty=request.difficulty,
        )
        quiz = await self.pipeline.run_structured(prompt, QUIZ_SCHEMA)

        questions = [
            QuizItem.model_validate(
                {
                    **question.model_dump(),
                    "id": str(uuid.uuid4()),
                    "topic": request.topic,
                    "difficulty": request.difficulty,
                }
            )
            for question in quiz.quiz
        ]
        logger.info(
            "Quiz generated",
            topic=request.topic,
            requested=request.question_count,
            actual=len(questions),
        )
        return QuizResponse(
            quiz=questions,
            metadata=QuizMetadata(
                generated_at=datetime.now(timezone.utc),
                requested_count=request.question_count,
                actual_count=len(questions),
                topic=request.topic,
                difficulty=request.difficulty,
            ),
        )

    def evaluate(self, request: EvaluateQuizAnswerRequest) -> QuizAnswerResult:
        """Compare answer indices. No model call."""
        is_correct = request.user_answer_index == request.correct_answer_index
        if is_correct:
            feedback = request.explanation or CORRECT_FEEDBACK
        else:
            feedback = INCORRECT_FEEDBACK

        return QuizAnswerResult(
            question_id=request.question_id,
            is_correct=is_correct,
            score=100 if is_correct else 0,
            feedback=feedback,
            user_answer_index=request.user_answer_index,
            correct_answer_index=request.correct_answer_index,
        )
