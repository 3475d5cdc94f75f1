"""
Domain Exception Handler.

Translates ``DomainError`` subclasses raised by the service layer into JSON
responses with the matching HTTP status (404, 403, 409, 400 ...).
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from interior_manager.core.errors import DomainError, ImportFileError
from interior_manager.core.logging_config import get_logger

logger = get_logger(__name__)


async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """
    Convert a domain error into ``{"detail": ...}``.

    Import errors additionally carry the list of parse problems under ``errors``.
    """
    logger.info(
        f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.message}",
        extra={"status_code": exc.status_code, "path": request.url.path},
    )
    content = {"detail": exc.message}
    if isinstance(exc, ImportFileError):
        content["errors"] = exc.errors
    elif exc.details is not None:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)
