"""
Generation pipeline: retrying call -> sanitize -> repair -> validate.

The orchestrator owns no HTTP knowledge. It returns a validated pydantic
model or raises one of three ``PipelineError`` kinds:

- GenerationError: the client raised (any exception type), after retries
  where the error was transient, or at once where it was not
- ResponseFormatError: no JSON could be parsed from the response
- SchemaValidationError: the payload broke its schema (all violations listed)

Schema failures are terminal. Re-prompting is left to callers.
"""

from typing import Any

import structlog

from arabic_grammar_gateway.llm.base_client import BaseLLMClient
from arabic_grammar_gateway.monitoring.metrics import (
    generation_attempts_total,
    pipeline_requests_total,
    validation_failures_total,
)
from arabic_grammar_gateway.retry.invoker import call_with_retry
from arabic_grammar_gateway.retry.policy import (
    DEFAULT_RETRY_CONFIG,
    RetryConfig,
    error_status_code,
    should_retry,
)

from .exceptions import GenerationError, ResponseFormatError, SchemaValidationError
from .repair import ShapeRepairer
from .sanitizer import ResponseSanitizer
from .schema import Invalid, ModelT, SchemaDescriptor, SchemaValidator

logger = structlog.get_logger(__name__)


class GenerationPipeline:
    """
    Composes the retrying invoker, the generation client, the sanitizer, an
    optional shape repairer and the schema validator.

    One instance can serve every endpoint: prompts, schemas and repair rules
    are passed per call. The client is injected, never looked up globally.
    """

    def __init__(
        self,
        llm_client: BaseLLMClient,
        retry_config: RetryConfig = DEFAULT_RETRY_CONFIG,
        sanitizer: ResponseSanitizer | None = None,
        validator: SchemaValidator | None = None,
    ):
        self.llm_client = llm_client
        self.retry_config = retry_config
        self.sanitizer = sanitizer or ResponseSanitizer()
        self.validator = validator or SchemaValidator()

    async def run_structured(
        self,
        prompt: str,
        schema: SchemaDescriptor[ModelT],
        repairer: ShapeRepairer | None = None,
        repair_default: str | None = None,
    ) -> ModelT:
        """
        Generate JSON for ``prompt`` and return it validated against ``schema``.

        Args:
            prompt: Fully rendered prompt
            schema: Expected payload shape
            repairer: Closed-vocabulary repair rules for this endpoint
            repair_default: Fallback value for unrepairable vocabulary fields

        Raises:
            GenerationError, ResponseFormatError, SchemaValidationError
        """
        raw = await self._generate(prompt, schema.name)

        try:
            payload = self.sanitizer.parse(raw)
        except ResponseFormatError:
            self._record_failure("format", schema.name)
            raise

        if repairer is not None:
            payload = self._repair(payload, repairer, repair_default, schema.name)

        return self._validate(payload, schema)

    async def run_text(
        self,
        prompt: str,
        schema: SchemaDescriptor[ModelT],
        field: str = "explanation",
    ) -> ModelT:
        """
        Generate free text, wrap it as ``{field: text}`` and validate it.

        Used by endpoints whose contract is prose with required markers
        rather than JSON.
        """
        raw = await self._generate(prompt, schema.name)
        return self._validate({field: raw.strip()}, schema)

    async def _generate(self, prompt: str, schema_name: str) -> str:
        attempts = 0

        async def attempt() -> str:
            nonlocal attempts
            attempts += 1
            try:
                text = await self.llm_client.generate(prompt)
            except Exception:
                generation_attempts_total.labels(schema=schema_name, outcome="error").inc()
                raise
            generation_attempts_total.labels(schema=schema_name, outcome="success").inc()
            return text

        try:
            return await call_with_retry(attempt, self.retry_config)
        except Exception as e:
            retryable = should_retry(e, self.retry_config)
            self._record_failure("upstream", schema_name)
            logger.error(
                "Generation failed",
                schema=schema_name,
                attempts=attempts,
                retryable=retryable,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise GenerationError(
                getattr(e, "message", None) or str(e) or type(e).__name__,
                retryable=retryable,
                attempts=attempts,
                status_code=error_status_code(e),
                cause_type=type(e).__name__,
            ) from e

    def _repair(
        self,
        payload: Any,
        repairer: ShapeRepairer,
        default: str | None,
        schema_name: str,
    ) -> Any:
        # Best effort: a repair bug must not fail the request
        try:
            return repairer.repair(payload, default=default)
        except Exception as e:
            logger.warning(
                "Shape repair failed, validating unrepaired payload",
                schema=schema_name,
                error_type=type(e).__name__,
                error=str(e),
            )
            return payload

    def _validate(self, payload: Any, schema: SchemaDescriptor[ModelT]) -> ModelT:
        outcome = self.validator.validate(schema, payload)
        if isinstance(outcome, Invalid):
            self._record_failure("schema", schema.name)
            raise SchemaValidationError(
                f"AI response failed schema validation with {len(outcome.violations)} violation(s)",
                schema_name=schema.name,
                violations=outcome.violations,
            )
        pipeline_requests_total.labels(schema=schema.name, result="valid").inc()
        return outcome.value

    @staticmethod
    def _record_failure(stage: str, schema_name: str) -> None:
        validation_failures_total.labels(stage=stage, schema=schema_name).inc()
        pipeline_requests_total.labels(schema=schema_name, result=stage).inc()

