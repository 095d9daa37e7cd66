"""Question/answer HTTP service."""
