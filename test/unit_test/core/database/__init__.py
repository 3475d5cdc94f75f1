"""Unit tests for the database layer in interior_manager/core/database.

Repository tests run against in-memory SQLite or a mocked session, so no
external database service is needed.
"""
