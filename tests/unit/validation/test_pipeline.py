"""
Unit tests for GenerationPipeline.

The generation client is scripted; backoff delays are zero.
"""

import json
from unittest.mock import MagicMock

import pytest

from arabic_grammar_gateway.llm.exceptions import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMGenerationError,
)
from arabic_grammar_gateway.models.enums import GrammarConceptType
from arabic_grammar_gateway.models.output_models import GrammarConcept, IrabExplanation, Quiz
from arabic_grammar_gateway.schemas import (
    EXPLANATION_SCHEMA,
    GRAMMAR_CONCEPT_REPAIRER,
    GRAMMAR_CONCEPT_SCHEMA,
    IRAB_SCHEMA,
    QUIZ_SCHEMA,
)
from arabic_grammar_gateway.validation.exceptions import (
    GenerationError,
    ResponseFormatError,
    SchemaValidationError,
)
from arabic_grammar_gateway.validation.pipeline import GenerationPipeline


def unavailable() -> LLMGenerationError:
    return LLMGenerationError("Gemini API error 503: The model is overloaded.", status_code=503)


def fenced(payload: dict) -> str:
    return "```json\n" + json.dumps(payload, ensure_ascii=False) + "\n```"


class TestRunStructured:
    """Test the JSON path of the pipeline."""

    @pytest.mark.asyncio
    async def test_retries_then_validates(self, scripted_llm, fast_retry_config, load_fixture):
        """Test 503, 503, then valid JSON -> validated payload after 3 calls."""
        client = scripted_llm(unavailable(), unavailable(), load_fixture("valid_quiz.json"))
        pipeline = GenerationPipeline(client, retry_config=fast_retry_config)

        result = await pipeline.run_structured("quiz prompt", QUIZ_SCHEMA)

        assert isinstance(result, Quiz)
        assert len(result.quiz) == 2
        assert client.calls == 3
        assert client.prompts == ["quiz prompt"] * 3

    @pytest.mark.asyncio
    async def test_fenced_response_accepted(self, scripted_llm, fast_retry_config, load_json_fixture):
        """Test Markdown-fenced JSON is sanitised before validation."""
        client = scripted_llm(fenced(load_json_fixture("valid_quiz.json")))
        pipeline = GenerationPipeline(client, retry_config=fast_retry_config)

        result = await pipeline.run_structured("p", QUIZ_SCHEMA)

        assert result.quiz[1].correct_answer_index == 1

    @pytest.mark.asyncio
    async def test_non_retryable_fails_once(self, scripted_llm, fast_retry_config):
        """Test an auth error -> GenerationError(retryable=False) after 1 call."""
        client = scripted_llm(
            LLMAuthenticationError("Gemini API error 401: API key not valid", status_code=401)
        )
        pipeline = GenerationPipeline(client, retry_config=fast_retry_config)

        with pytest.raises(GenerationError) as exc_info:
            await pipeline.run_structured("p", QUIZ_SCHEMA)

        error = exc_info.value
        assert client.calls == 1
        assert error.retryable is False
        assert error.attempts == 1
        assert error.status_code == 401
        assert error.details["cause"] == "LLMAuthenticationError"
        assert error.kind == "upstream"

    @pytest.mark.asyncio
    async def test_exhausted_retries(self, scripted_llm, fast_retry_config):
        """Test max_retries+1 transient failures -> GenerationError(retryable=True)."""
        client = scripted_llm(*[unavailable() for _ in range(4)])
        pipeline = GenerationPipeline(client, retry_config=fast_retry_config)

        with pytest.raises(GenerationError) as exc_info:
            await pipeline.run_structured("p", QUIZ_SCHEMA)

        assert client.calls == 4
        assert exc_info.value.retryable is True
        assert exc_info.value.attempts == 4
        assert exc_info.value.status_code == 503
        assert isinstance(exc_info.value.__cause__, LLMGenerationError)

    @pytest.mark.asyncio
    async def test_connection_error_not_retried(self, scripted_llm, fast_retry_config):
        """Test a network error without a transient phrase is fatal."""
        client = scripted_llm(LLMConnectionError("Network error: connection refused"))
        pipeline = GenerationPipeline(client, retry_config=fast_retry_config)

        with pytest.raises(GenerationError) as exc_info:
            await pipeline.run_structured("p", QUIZ_SCHEMA)

        assert client.calls == 1
        assert exc_info.value.retryable is False
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_unparseable_response(self, scripted_llm, fast_retry_config):
        """Test non-JSON output -> ResponseFormatError, no retry."""
        client = scripted_llm("Sorry, I cannot help with that.")
        pipeline = GenerationPipeline(client, retry_config=fast_retry_config)

        with pytest.raises(ResponseFormatError) as exc_info:
            await pipeline.run_structured("p", QUIZ_SCHEMA)

        assert client.calls == 1
        assert exc_info.value.raw_content == "Sorry, I cannot help with that."

    @pytest.mark.asyncio
    async def test_schema_violation_is_terminal(self, scripted_llm, fast_retry_config, load_json_fixture):
        """Test a schema failure lists violations and is not retried."""
        quiz = load_json_fixture("valid_quiz.json")
        quiz["quiz"][0]["options"] = quiz["quiz"][0]["options"][:3]
        client = scripted_llm(json.dumps(quiz, ensure_ascii=False))
        pipeline = GenerationPipeline(client, retry_config=fast_retry_config)

        with pytest.raises(SchemaValidationError) as exc_info:
            await pipeline.run_structured("p", QUIZ_SCHEMA)

        error = exc_info.value
        assert client.calls == 1
        assert error.schema_name == "quiz"
        assert len(error.violations) == 1
        assert error.violations[0].path == "quiz.0.options"
        assert error.details["violations"][0]["path"] == "quiz.0.options"


class TestRepairStep:
    """Test the optional shape repair between parse and validate."""

    @pytest.mark.asyncio
    async def test_synonyms_repaired_before_validation(
        self, scripted_llm, fast_retry_config, load_json_fixture
    ):
        """Test grammatical_case is repaired to case and validates."""
        concept = load_json_fixture("valid_grammar_concept.json")
        concept["type"] = "grammatical_case"
        concept["relatedConcepts"][0]["type"] = "Part Of Speech"
        client = scripted_llm(json.dumps(concept, ensure_ascii=False))
        pipeline = GenerationPipeline(client, retry_config=fast_retry_config)

        result = await pipeline.run_structured(
            "p", GRAMMAR_CONCEPT_SCHEMA, repairer=GRAMMAR_CONCEPT_REPAIRER, repair_default="case"
        )

        assert isinstance(result, GrammarConcept)
        assert result.type is GrammarConceptType.CASE
        assert result.related_concepts[0].type is GrammarConceptType.PART_OF_SPEECH

    @pytest.mark.asyncio
    async def test_without_repairer_synonym_rejected(
        self, scripted_llm, fast_retry_config, load_json_fixture
    ):
        """Test the same payload fails when no repairer is given."""
        concept = load_json_fixture("valid_grammar_concept.json")
        concept["type"] = "grammatical_case"
        client = scripted_llm(json.dumps(concept, ensure_ascii=False))
        pipeline = GenerationPipeline(client, retry_config=fast_retry_config)

        with pytest.raises(SchemaValidationError) as exc_info:
            await pipeline.run_structured("p", GRAMMAR_CONCEPT_SCHEMA)

        assert exc_info.value.violations[0].path == "type"

    @pytest.mark.asyncio
    async def test_repair_failure_falls_back(self, scripted_llm, fast_retry_config, load_fixture):
        """Test a crashing repairer is logged and the unrepaired payload validated."""
        repairer = MagicMock()
        repairer.repair.side_effect = RuntimeError("boom")
        client = scripted_llm(load_fixture("valid_grammar_concept.json"))
        pipeline = GenerationPipeline(client, retry_config=fast_retry_config)

        result = await pipeline.run_structured(
            "p", GRAMMAR_CONCEPT_SCHEMA, repairer=repairer, repair_default="case"
        )

        assert result.type is GrammarConceptType.CASE
        repairer.repair.assert_called_once()


class TestRunText:
    """Test the free-text path."""

    @pytest.mark.asyncio
    async def test_irab_text_wrapped(self, scripted_llm, fast_retry_config):
        """Test prose is stripped and wrapped under the field name."""
        text = "\nالجملة الأصلية: العلم نور\nالإعراب:\nالعلم: مبتدأ مرفوع\n"
        client = scripted_llm(text)
        pipeline = GenerationPipeline(client, retry_config=fast_retry_config)

        result = await pipeline.run_text("p", IRAB_SCHEMA)

        assert isinstance(result, IrabExplanation)
        assert result.explanation == text.strip()

    @pytest.mark.asyncio
    async def test_irab_without_markers(self, scripted_llm, fast_retry_config):
        """Test prose missing the required sections is rejected."""
        client = scripted_llm("العلم نور: مبتدأ وخبر")
        pipeline = GenerationPipeline(client, retry_config=fast_retry_config)

        with pytest.raises(SchemaValidationError) as exc_info:
            await pipeline.run_text("p", IRAB_SCHEMA)

        assert {v.path for v in exc_info.value.violations} == {"explanation"}

    @pytest.mark.asyncio
    async def test_text_path_retries(self, scripted_llm, fast_retry_config):
        """Test the text path shares the retry behaviour."""
        client = scripted_llm(unavailable(), "شرح مفصل")
        pipeline = GenerationPipeline(client, retry_config=fast_retry_config)

        result = await pipeline.run_text("p", EXPLANATION_SCHEMA)

        assert result.explanation == "شرح مفصل"
        assert client.calls == 2


class ProviderError(Exception):
    """A client error outside the LLM exception hierarchy."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class TestForeignClientErrors:
    """Test errors not derived from LLMClientError are still classified."""

    @pytest.mark.asyncio
    async def test_status_code_attribute_retried(self, scripted_llm, fast_retry_config):
        """Test a plain exception with status_code=503 is retried then wrapped."""
        client = scripted_llm(*[ProviderError("upstream busy", 503) for _ in range(4)])
        pipeline = GenerationPipeline(client, retry_config=fast_retry_config)

        with pytest.raises(GenerationError) as exc_info:
            await pipeline.run_structured("p", QUIZ_SCHEMA)

        error = exc_info.value
        assert client.calls == 4
        assert error.retryable is True
        assert error.attempts == 4
        assert error.status_code == 503
        assert error.details["cause"] == "ProviderError"
        assert isinstance(error.__cause__, ProviderError)

    @pytest.mark.asyncio
    async def test_plain_exception_fails_once(self, scripted_llm, fast_retry_config):
        """Test an unclassified exception -> GenerationError(retryable=False), 1 call."""
        client = scripted_llm(ValueError("unexpected payload"))
        pipeline = GenerationPipeline(client, retry_config=fast_retry_config)

        with pytest.raises(GenerationError) as exc_info:
            await pipeline.run_text("p", EXPLANATION_SCHEMA)

        assert client.calls == 1
        assert exc_info.value.retryable is False
        assert exc_info.value.attempts == 1
        assert exc_info.value.status_code is None
        assert "unexpected payload" in exc_info.value.message
