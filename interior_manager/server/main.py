"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware
(CORS, request logging), registers exception handlers and includes all API
routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from interior_manager.core.database import async_session_maker, init_db
from interior_manager.core.logging_config import get_logger, setup_logging
from interior_manager.core.monitoring import initialize_logfire

from .api.v1 import (
    auth,
    boq,
    design_files,
    health,
    notifications,
    payments,
    project_members,
    project_updates,
    projects,
    rbac,
    snags,
    tasks,
    users,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestLoggingMiddleware
from .services.push import close_push_client
from .services.rbac import RBACService

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    On startup the database schema is prepared (SQLite only) and the
    permission catalog is seeded. On shutdown the push client is closed.
    """
    # Startup
    try:
        logger.info("Starting up Interior Manager Server...")
        await init_db()
        async with async_session_maker() as session:
            await RBACService(session).seed_permissions()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info("Shutting down Interior Manager Server...")
    await close_push_client()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Interior Manager Server API

    Backend for managing interior fit-out projects: bills of quantities,
    design approvals, work steps and tasks, snags, invoices and payments,
    with in-app and push notifications.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)
initialize_logfire(app)

api = constant.API_V1_STR
app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{api}/auth")
app.include_router(users.router, prefix=f"{api}/admin/users")
app.include_router(rbac.router, prefix=f"{api}/rbac")
app.include_router(projects.router, prefix=f"{api}/projects")
app.include_router(project_members.router, prefix=f"{api}/projects")
app.include_router(tasks.steps_router, prefix=f"{api}/project-steps")
app.include_router(tasks.router, prefix=f"{api}/tasks")
app.include_router(project_updates.router, prefix=f"{api}/project-updates")
app.include_router(boq.router, prefix=f"{api}/boq")
app.include_router(design_files.router, prefix=f"{api}/design-files")
app.include_router(snags.router, prefix=f"{api}/snags")
app.include_router(payments.invoices_router, prefix=f"{api}/invoices")
app.include_router(payments.router, prefix=f"{api}/payments")
app.include_router(notifications.router, prefix=f"{api}/notifications")
