"""Pydantic schema models for API responses that are not entity DTOs."""
