"""
Exception handlers for the Interior Manager server.

``setup_exception_handlers`` registers the domain error translator and the
catch-all 500 handler with the FastAPI application.
"""

from fastapi import FastAPI

from interior_manager.core.errors import DomainError
from interior_manager.core.logging_config import get_logger

from .domain_handler import domain_exception_handler
from .global_handler import global_exception_handler

logger = get_logger(__name__)


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(DomainError, domain_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")


__all__ = ["domain_exception_handler", "global_exception_handler", "setup_exception_handlers"]
