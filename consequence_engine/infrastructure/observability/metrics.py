"""Prometheus metrics for monitoring analysis outcomes, risk levels and upstream failures"""

from typing import Iterable
from prometheus_client import Counter, Histogram

# Analysis metrics
analysis_counter = Counter(
    "consequence_analysis_total",
    "Total consequence analyses run",
    ["outcome"],  # success | failure
)

risk_level_counter = Counter(
    "consequence_risk_level_total",
    "Consequence reports by overall risk level",
    ["risk_level"],  # low | moderate | high
)

feasibility_counter = Counter(
    "consequence_feasibility_total",
    "Consequence reports by feasibility verdict",
    ["feasible"],  # true | false
)

phase_failure_counter = Counter(
    "consequence_phase_failures_total",
    "Pipeline stages that recorded an error",
    ["phase"],
)

analysis_duration_histogram = Histogram(
    "consequence_analysis_duration_seconds",
    "Wall time of one pipeline run",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

# Account store metrics
account_store_failures_counter = Counter(
    "account_store_failures_total",
    "Failed account store calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_success(execution_time_ms: float, feasible: bool, risk_level: str) -> None:
    """Record metrics for a completed analysis"""
    analysis_counter.labels(outcome="success").inc()
    analysis_duration_histogram.observe(execution_time_ms / 1000)
    feasibility_counter.labels(feasible="true" if feasible else "false").inc()
    risk_level_counter.labels(risk_level=risk_level).inc()


def record_failure(execution_time_ms: float, failed_phases: Iterable[str]) -> None:
    """Record metrics for an analysis that returned an error envelope"""
    analysis_counter.labels(outcome="failure").inc()
    analysis_duration_histogram.observe(execution_time_ms / 1000)
    for phase in failed_phases:
        phase_failure_counter.labels(phase=phase).inc()
