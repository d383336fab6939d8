"""LLM provider client, adapters and failover."""
