# Métricas y Observabilidad para NL2SQL

import logging
from typing import Dict
from dataclasses import dataclass, field
from collections import defaultdict
from threading import Lock

logger = logging.getLogger(__name__)


@dataclass
class MetricCounter:
    """Contador simple para métricas"""

    value: int = 0
    _lock: Lock = field(default_factory=Lock)

    def inc(self, amount: int = 1):
        with self._lock:
            self.value += amount

    def get(self) -> int:
        return self.value


@dataclass
class MetricHistogram:
    """Histograma para latencias"""

    values: list = field(default_factory=list)
    _lock: Lock = field(default_factory=Lock)

    def observe(self, value: float):
        with self._lock:
            self.values.append(value)
            # Mantener solo últimas 1000 observaciones
            if len(self.values) > 1000:
                self.values = self.values[-1000:]

    def get_stats(self) -> Dict:
        if not self.values:
            return {"count": 0, "avg": 0, "min": 0, "max": 0, "p50": 0, "p95": 0}

        sorted_vals = sorted(self.values)
        count = len(sorted_vals)

        return {
            "count": count,
            "avg": sum(sorted_vals) / count,
            "min": sorted_vals[0],
            "max": sorted_vals[-1],
            "p50": sorted_vals[int(count * 0.5)],
            "p95": sorted_vals[int(count * 0.95)] if count > 20 else sorted_vals[-1],
        }


class MetricsCollector:
    """
    Colector de métricas para NL2SQL.
    Compatible con formato Prometheus.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._reset_state()
        self._initialized = True

    def _reset_state(self):
        # Contadores
        self.requests_total = defaultdict(MetricCounter)  # por endpoint
        self.errors_total = defaultdict(MetricCounter)  # por endpoint
        self.queries_total = MetricCounter()
        self.validation_blocks = MetricCounter()
        self.llm_calls = defaultdict(MetricCounter)  # por proveedor
        self.llm_failures = defaultdict(MetricCounter)  # por proveedor
        self.llm_fallbacks = MetricCounter()

        # Histogramas de latencia
        self.request_duration = defaultdict(MetricHistogram)  # por endpoint
        self.llm_duration = defaultdict(MetricHistogram)  # por proveedor
        self.db_query_duration = MetricHistogram()

        # Gauges
        self.tables_introspected = 0

    def reset(self):
        """Reset para testing"""
        self._reset_state()

    def record_request(self, endpoint: str, duration_ms: float, success: bool):
        self.requests_total[endpoint].inc()
        self.request_duration[endpoint].observe(duration_ms)
        if not success:
            self.errors_total[endpoint].inc()

    def record_query(self):
        self.queries_total.inc()

    def record_validation_block(self):
        self.validation_blocks.inc()

    def record_llm_call(self, provider: str, duration_ms: float, success: bool):
        self.llm_calls[provider].inc()
        self.llm_duration[provider].observe(duration_ms)
        if not success:
            self.llm_failures[provider].inc()

    def record_fallback(self):
        self.llm_fallbacks.inc()

    def record_db_query(self, duration_ms: float):
        self.db_query_duration.observe(duration_ms)

    def set_tables_introspected(self, count: int):
        self.tables_introspected = count

    def get_metrics(self) -> Dict:
        """Retorna todas las métricas en formato dict"""
        return {
            "counters": {
                "requests_total": {k: v.get() for k, v in self.requests_total.items()},
                "errors_total": {k: v.get() for k, v in self.errors_total.items()},
                "queries_total": self.queries_total.get(),
                "validation_blocks": self.validation_blocks.get(),
                "llm_calls": {k: v.get() for k, v in self.llm_calls.items()},
                "llm_failures": {k: v.get() for k, v in self.llm_failures.items()},
                "llm_fallbacks": self.llm_fallbacks.get(),
            },
            "histograms": {
                "request_duration_ms": {
                    k: v.get_stats() for k, v in self.request_duration.items()
                },
                "llm_duration_ms": {
                    k: v.get_stats() for k, v in self.llm_duration.items()
                },
                "db_query_duration_ms": self.db_query_duration.get_stats(),
            },
            "gauges": {
                "tables_introspected": self.tables_introspected,
            },
        }

    def get_prometheus_format(self) -> str:
        """Retorna métricas en formato Prometheus"""
        lines = []
        metrics = self.get_metrics()
        counters = metrics["counters"]

        for endpoint, count in counters["requests_total"].items():
            lines.append(f'nl2sql_requests_total{{endpoint="{endpoint}"}} {count}')
        for endpoint, count in counters["errors_total"].items():
            lines.append(f'nl2sql_errors_total{{endpoint="{endpoint}"}} {count}')

        lines.append(f"nl2sql_queries_total {counters['queries_total']}")
        lines.append(f"nl2sql_validation_blocks_total {counters['validation_blocks']}")

        for provider, count in counters["llm_calls"].items():
            lines.append(f'nl2sql_llm_calls_total{{provider="{provider}"}} {count}')
        for provider, count in counters["llm_failures"].items():
            lines.append(f'nl2sql_llm_failures_total{{provider="{provider}"}} {count}')
        lines.append(f"nl2sql_llm_fallbacks_total {counters['llm_fallbacks']}")

        lines.append(
            f"nl2sql_tables_introspected {metrics['gauges']['tables_introspected']}"
        )

        db_stats = metrics["histograms"]["db_query_duration_ms"]
        lines.append(f"nl2sql_db_query_duration_avg_ms {db_stats['avg']:.2f}")
        lines.append(f"nl2sql_db_query_duration_p95_ms {db_stats['p95']:.2f}")

        return "\n".join(lines)


def get_metrics() -> MetricsCollector:
    """Obtiene la instancia singleton de métricas"""
    return MetricsCollector()
