"""Per-service API clients, models and helpers."""
