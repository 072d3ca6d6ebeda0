"""Prometheus metrics for simulations, recommendations and advisory calls"""

from prometheus_client import Counter, Histogram

from payoff_planner.domain.models import SimulationResult, StrategyName

# Simulation metrics
simulation_counter = Counter(
    "payoff_simulation_total",
    "Total payoff simulations run",
    ["strategy", "outcome"],  # resolved | unresolved
)

recommendation_counter = Counter(
    "payoff_recommendation_total",
    "Strategies recommended by the comparator",
    ["strategy"],
)

# Advisory metrics
advisory_latency_histogram = Histogram(
    "advisory_latency_seconds",
    "Text-generation request time",
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0],
)

advisory_failure_counter = Counter(
    "advisory_failures_total",
    "Failed text-generation attempts",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_simulation(result: SimulationResult) -> None:
    simulation_counter.labels(strategy=result.strategy.value, outcome=result.outcome.value).inc()


def record_recommendation(strategy: StrategyName) -> None:
    recommendation_counter.labels(strategy=strategy.value).inc()
