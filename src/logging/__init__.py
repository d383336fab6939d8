"""Structured logging: formatters, rotating handlers, per-job context."""
