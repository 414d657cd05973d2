"""User-facing entry points: HTTP API and CLI."""
