"""SQLite persistence for articles and formatting jobs."""
