"""Configuration: Settings loaded from environment and .env."""
