# src/tracking/models.py - v1
"""Tracking domain models: ModelPricing, CallCost, MonthlyEstimate, WorkerMetrics."""

from __future__ import annotations

from pydantic import BaseModel


class ModelPricing(BaseModel):
    """Per-model token pricing in USD per 1M tokens."""

    model: str
    input_price_per_1m: float
    output_price_per_1m: float


class CallCost(BaseModel):
    """Estimated cost of one completion."""

    model: str
    input_tokens: int
    output_tokens: int
    total_tokens: int
    input_cost_usd: float
    output_cost_usd: float
    total_cost_usd: float
    pricing_known: bool = True


class MonthlyEstimate(BaseModel):
    """Projected monthly spend for a steady request rate."""

    model: str
    monthly_requests: int
    monthly_tokens: int
    estimated_monthly_cost_usd: float
    breakdown: CallCost


class WorkerMetrics(BaseModel):
    """In-process counters for one worker run (not persisted)."""

    jobs_processed: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    llm_calls: int = 0
    failures: int = 0
    total_tokens: int = 0

    def summary(self) -> str:
        return (
            f"jobs={self.jobs_processed} cache_hits={self.cache_hits} "
            f"cache_misses={self.cache_misses} llm_calls={self.llm_calls} "
            f"tokens={self.total_tokens} failures={self.failures}"
        )
