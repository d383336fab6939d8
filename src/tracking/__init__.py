"""Daily analytics counters and cost estimation."""
