"""Grammar analysis: structured analysis, explanation and i'rab text."""

import structlog

from arabic_grammar_gateway.llm.prompt_builder import PromptBuilder
from arabic_grammar_gateway.models.input_models import AnalyzeTextRequest, ExplainAnalysisRequest
from arabic_grammar_gateway.models.output_models import Explanation, IrabExplanation, TextAnalysis
from arabic_grammar_gateway.schemas import EXPLANATION_SCHEMA, IRAB_SCHEMA, TEXT_ANALYSIS_SCHEMA
from arabic_grammar_gateway.validation.pipeline import GenerationPipeline

logger = structlog.get_logger(__name__)


class AnalysisService:
    def __init__(self, pipeline: GenerationPipeline, prompts: PromptBuilder):
        self.pipeline = pipeline
        self.prompts = prompts

    async def analyze(self, request: AnalyzeTextRequest) -> TextAnalysis:
        """Tokens with morphology plus a recursive syntax tree."""
        prompt = self.prompts.render("analyze_text", arabic_text=request.arabic_text)
        result = await self.pipeline.run_structured(prompt, TEXT_ANALYSIS_SCHEMA)
        logger.info("Text analyzed", token_count=len(result.tokens))
        return result

    async def explain(self, request: ExplainAnalysisRequest) -> Explanation:
        prompt = self.prompts.render(
            "explain_analysis",
            analysis=request.analysis_result,
            arabic_text=request.arabic_text,
        )
        return await self.pipeline.run_text(prompt, EXPLANATION_SCHEMA)

    async def irab(self, request: AnalyzeTextRequest) -> IrabExplanation:
        """Word-by-word i'rab in the fixed Arabic layout."""
        prompt = self.prompts.render("irab_text", arabic_text=request.arabic_text)
        return await self.pipeline.run_text(prompt, IRAB_SCHEMA)
