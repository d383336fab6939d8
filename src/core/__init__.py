"""Shared error taxonomy."""
