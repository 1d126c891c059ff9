"""Prometheus metrics for the generation pipeline."""

from arabic_grammar_gateway.monitoring.metrics import (
    generation_attempts_total,
    llm_latency_seconds,
    pipeline_requests_total,
    repairs_total,
    retries_total,
    validation_failures_total,
)

__all__ = [
    "generation_attempts_total",
    "llm_latency_seconds",
    "pipeline_requests_total",
    "repairs_total",
    "retries_total",
    "validation_failures_total",
]
