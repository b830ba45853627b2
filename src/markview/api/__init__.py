"""Local JSON API (requires the api extra)."""
