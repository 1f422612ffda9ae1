"""Core domain: models, coding engine and ports."""
