"""Background formatting worker."""
