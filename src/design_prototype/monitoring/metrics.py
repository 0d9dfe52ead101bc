"""
Metrics Collection
Prometheus metrics for generation round trips
"""

import time

from prometheus_client import Counter, Gauge, Histogram, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the service.
    """

    def __init__(self) -> None:
        # Generation metrics
        self.generation_requests_total = Counter(
            "proto_generation_requests_total",
            "Total number of generation requests",
            ["mode", "status"],
        )
        self.generation_duration = Histogram(
            "proto_generation_duration_seconds",
            "Generation round trip duration in seconds",
            ["mode"],
            buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0],
        )

        # LLM metrics
        self.llm_calls_total = Counter(
            "proto_llm_calls_total",
            "Total number of LLM API calls",
            ["model", "status"],
        )
        self.prompt_chars = Histogram(
            "proto_prompt_chars",
            "Prompt size in characters",
            buckets=[500, 1000, 2500, 5000, 10000, 25000, 50000],
        )

        # Extraction metrics
        self.extraction_failures_total = Counter(
            "proto_extraction_failures_total",
            "Responses that could not be turned into artifacts",
            ["kind"],
        )

        # System metrics
        self.uptime = Gauge(
            "proto_uptime_seconds",
            "Service uptime in seconds",
        )
        self.start_time = time.time()

    def record_generation(self, mode: str, status: str, duration: float) -> None:
        """Record one generation request."""
        self.generation_requests_total.labels(mode=mode, status=status).inc()
        self.generation_duration.labels(mode=mode).observe(duration)

    def record_llm_call(self, model: str, status: str, prompt_chars: int) -> None:
        """Record an LLM API call."""
        self.llm_calls_total.labels(model=model, status=status).inc()
        self.prompt_chars.observe(prompt_chars)

    def record_extraction_failure(self, kind: str) -> None:
        """Record a parse or validation failure."""
        self.extraction_failures_total.labels(kind=kind).inc()

    def update_uptime(self) -> None:
        """Update the uptime metric."""
        self.uptime.set(time.time() - self.start_time)

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        self.update_uptime()
        return generate_latest()


# Global metrics collector instance
metrics_collector = MetricsCollector()
