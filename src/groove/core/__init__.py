"""Shared infrastructure: error taxonomy and structured logging."""
