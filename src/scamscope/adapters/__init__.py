"""Adapters that satisfy the core ports (HTTP completion, SQLite, identity)."""
