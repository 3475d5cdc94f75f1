"""
Base database models and utilities.

This module provides the foundational database components used across
all entities in the database layer using SQLModel.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import ConfigDict
from sqlmodel import SQLModel


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


def new_id() -> str:
    """Generate a primary key (UUID4 string, 36 characters)."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Current UTC time as a naive datetime.

    Columns are stored without timezone so values read back from SQLite and
    Postgres compare cleanly against this.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
