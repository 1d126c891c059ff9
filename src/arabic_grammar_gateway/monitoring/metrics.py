"""Custom Prometheus metrics for the Arabic Grammar Gateway.

Exposed at /metrics alongside the HTTP metrics of
prometheus-fastapi-instrumentator. Worth alerting on:
- retries_total (provider overload)
- validation_failures_total (model output drifting from the schemas)
"""

from prometheus_client import Counter, Histogram

# === Generation Metrics ===

generation_attempts_total = Counter(
    "generation_attempts_total",
    "Total calls made to the generation client",
    ["schema", "outcome"],
)
"""
Generation client calls per logical request schema.

Labels:
- schema: descriptor name (text_analysis, quiz, grammar_concept, ...)
- outcome: success, error
"""

retries_total = Counter(
    "retries_total",
    "Total retries scheduled by the retrying invoker",
    ["reason"],
)
"""
Retries scheduled after a transient failure.

Labels:
- reason: status (retryable status code), message (transient message marker),
  condition (custom predicate)
"""

llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "Generation request latency in seconds",
    ["model", "success"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)
"""
Single-shot generation latency, retries not included.

Labels:
- model: Gemini model name
- success: true, false
"""

# === Validation Metrics ===

validation_failures_total = Counter(
    "validation_failures_total",
    "Total pipeline failures by stage and schema",
    ["stage", "schema"],
)
"""
Pipeline failures after generation.

Labels:
- stage: upstream, format, schema
- schema: descriptor name
"""

repairs_total = Counter(
    "repairs_total",
    "Closed-vocabulary values rewritten by the shape repairer",
    ["domain", "method"],
)
"""
Shape repairs applied before validation.

Labels:
- domain: synonym table domain (grammar_concept_type, exercise_type)
- method: normalized, synonym, default
"""

pipeline_requests_total = Counter(
    "pipeline_requests_total",
    "Pipeline runs by schema and result",
    ["schema", "result"],
)
"""
End-to-end pipeline outcomes.

Labels:
- schema: descriptor name
- result: valid, upstream, format, schema
"""
