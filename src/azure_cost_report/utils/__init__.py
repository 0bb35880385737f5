"""Authentication and response normalization helpers."""
