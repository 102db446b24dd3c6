"""
Unit Tests

Unit tests run in isolation without external dependencies.
LLM providers are mocked and the database is in-memory SQLite.
"""
