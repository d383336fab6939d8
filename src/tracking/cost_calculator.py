# src/tracking/cost_calculator.py - v1
"""Cost estimation for LLM completions.

Prices are USD per 1M tokens. Unknown models fall back to DEFAULT_PRICE and
are flagged with pricing_known=False.
"""

from __future__ import annotations

import logging

from kaiville_research.llm.models import LLMResponse
from kaiville_research.tracking.models import CallCost, ModelPricing, MonthlyEstimate

logger = logging.getLogger(__name__)


def _p(model: str, input_price: float, output_price: float) -> ModelPricing:
    return ModelPricing(
        model=model, input_price_per_1m=input_price, output_price_per_1m=output_price,
    )


DEFAULT_PRICING: dict[str, ModelPricing] = {
    p.model: p
    for p in (
        _p("gpt-4-turbo-preview", 10.0, 30.0),
        _p("gpt-4-0125-preview", 10.0, 30.0),
        _p("gpt-4", 30.0, 60.0),
        _p("gpt-3.5-turbo", 0.50, 1.50),
        _p("gpt-35-turbo", 0.50, 1.50),
        _p("gpt-5", 1.25, 10.0),
        _p("gpt-5-mini", 0.60, 2.0),
        _p("gpt-5-nano", 0.30, 1.0),
        _p("sonar", 1.0, 1.0),
        _p("sonar-pro", 3.0, 15.0),
        _p("sonar-reasoning-pro", 2.0, 8.0),
        _p("grok-4-0709", 3.0, 15.0),
        _p("grok-2-1212", 3.0, 15.0),
        _p("claude-3-opus-20240229", 15.0, 75.0),
        _p("claude-3-haiku-20240307", 0.25, 1.25),
    )
}

DEFAULT_PRICE = _p("default", 10.0, 30.0)

# Typical research generation: short prompt, long completion
_INPUT_SHARE = 0.3


def compute_cost(
    model: str,
    input_tokens: int,
    output_tokens: int,
    pricing: dict[str, ModelPricing] | None = None,
) -> CallCost:
    """Estimated cost of a completion, rounded to 4 decimal places."""
    pricing = pricing or DEFAULT_PRICING
    p = pricing.get(model)
    known = p is not None
    if p is None:
        logger.debug("Pricing not found for model %s, using defaults", model)
        p = DEFAULT_PRICE

    input_cost = input_tokens * p.input_price_per_1m / 1_000_000
    output_cost = output_tokens * p.output_price_per_1m / 1_000_000
    return CallCost(
        model=model,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=input_tokens + output_tokens,
        input_cost_usd=round(input_cost, 4),
        output_cost_usd=round(output_cost, 4),
        total_cost_usd=round(input_cost + output_cost, 4),
        pricing_known=known,
    )


def compute_response_cost(
    response: LLMResponse, pricing: dict[str, ModelPricing] | None = None
) -> CallCost:
    """Estimated cost of an LLMResponse, from its reported usage."""
    return compute_cost(response.model, response.input_tokens, response.output_tokens, pricing)


def monthly_estimate(
    daily_requests: int,
    avg_tokens_per_request: int,
    model: str,
    pricing: dict[str, ModelPricing] | None = None,
) -> MonthlyEstimate:
    """Project 30 days of usage at a fixed request rate."""
    monthly_requests = daily_requests * 30
    monthly_tokens = monthly_requests * avg_tokens_per_request
    input_tokens = int(monthly_tokens * _INPUT_SHARE)
    output_tokens = monthly_tokens - input_tokens
    cost = compute_cost(model, input_tokens, output_tokens, pricing)
    return MonthlyEstimate(
        model=model,
        monthly_requests=monthly_requests,
        monthly_tokens=monthly_tokens,
        estimated_monthly_cost_usd=cost.total_cost_usd,
        breakdown=cost,
    )
