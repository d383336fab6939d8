"""Content-hash cache of formatted output."""
