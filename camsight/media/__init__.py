"""Media pipeline helpers."""
