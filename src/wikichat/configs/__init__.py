"""Application configuration (pydantic-settings)."""
