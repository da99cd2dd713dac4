"""Utility modules for the API layer (orjson responses)."""
