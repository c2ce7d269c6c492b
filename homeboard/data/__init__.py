"""Data sources: HTTP JSON fetching, payload models and periodic tasks."""
