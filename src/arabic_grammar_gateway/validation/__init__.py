"""
Sanitize -> repair -> validate pipeline for model output.

- sanitizer.py: strip code fences, strict JSON parse
- repair.py: closed-vocabulary repair driven by versioned synonym tables
- schema.py: JSON Schema + pydantic validation with full violation lists
- pipeline.py: orchestrator wrapping the retrying generation call
- exceptions.py: classified failures (upstream, format, schema)
"""

from .exceptions import (
    GenerationError,
    PipelineError,
    ResponseFormatError,
    SchemaValidationError,
)
from .pipeline import GenerationPipeline
from .repair import RepairRule, ShapeRepairer, SynonymTable
from .sanitizer import ResponseSanitizer, strip_code_fences
from .schema import (
    Invalid,
    RecursiveField,
    SchemaDescriptor,
    SchemaValidator,
    Valid,
    ValidationOutcome,
    Violation,
)

__all__ = [
    # Orchestrator
    "GenerationPipeline",
    # Components
    "ResponseSanitizer",
    "strip_code_fences",
    "RepairRule",
    "ShapeRepairer",
    "SynonymTable",
    "RecursiveField",
    "SchemaDescriptor",
    "SchemaValidator",
    "Valid",
    "Invalid",
    "ValidationOutcome",
    "Violation",
    # Failures
    "PipelineError",
    "GenerationError",
    "ResponseFormatError",
    "SchemaValidationError",
]
