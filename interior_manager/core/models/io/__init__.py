"""
I/O models: request and response schemas for the REST API.

These are plain Pydantic models, kept separate from the SQLModel table
entities so the API contract can evolve independently of the schema.
"""
