"""
FastAPI application entry point for Clinic Service API.

This module configures and creates the FastAPI application with:
- Structured JSON Logging: Request/response logging with request ids
- Dependency Injection: Services and repositories injected via Depends()
- Exception Handling: Uniform error envelope via setup_exception_handlers()
- CORS Middleware: Allows cross-origin requests from browser clients
- Lifespan Management: Logging setup and database initialization

Architecture Overview:
    ┌─────────────────────────────────────────────────────────────┐
    │                     FastAPI Application                      │
    ├─────────────────────────────────────────────────────────────┤
    │  Middleware Stack (order matters!)                          │
    │    ├── LoggingMiddleware  - Request logging & request id    │
    │    └── CORSMiddleware     - Cross-origin support            │
    ├─────────────────────────────────────────────────────────────┤
    │  Routers (api/routers/)                                     │
    │    ├── health.py     - /, /health, /ready                   │
    │    ├── patients.py   - Patient CRUD + paged search          │
    │    └── exams.py      - Exam CRUD + paged search             │
    ├─────────────────────────────────────────────────────────────┤
    │  Services (services/)     ← Injected via Depends()          │
    │    ├── PatientService     - Patient rules, cascade delete   │
    │    └── ExamService        - Exam rules                      │
    ├─────────────────────────────────────────────────────────────┤
    │  Repositories (repositories/)   ← Injected into Services    │
    │    ├── PatientRepository        - Patient data access       │
    │    └── ExamRepository           - Exam data access          │
    ├─────────────────────────────────────────────────────────────┤
    │  Database (SQLite, app.state.database)                      │
    └─────────────────────────────────────────────────────────────┘
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from core.config import API_HOST, API_PORT, API_RELOAD, settings
from core.exceptions import setup_exception_handlers
from core.logging_config import setup_logging
from core.middleware import LoggingMiddleware
from api.routers import exams_router, health_router, patients_router
from repositories import Database


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application.

    Startup:
        - Configures logging (before any other log line)
        - Opens the database unless one was supplied to create_app()

    Shutdown:
        - Logs shutdown message
    """
    setup_logging(level=settings.log_level, json_format=settings.json_logs)

    logger = logging.getLogger(__name__)
    logger.info("Starting Clinic Service API...")

    if getattr(app.state, "database", None) is None:
        app.state.database = Database(
            db_path=settings.database_path,
            busy_timeout=settings.clinic_svc_db_busy_timeout
        )
    logger.info(
        "Database initialized",
        extra={"db_path": app.state.database.db_path}
    )

    yield

    logger.info("Clinic Service API shutting down...")


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        database: Database to serve from. When omitted, the lifespan opens
            the one configured in settings.
    """
    app = FastAPI(
        title="Clinic Service API",
        description="REST API for clinical records. Register patients and the exams performed for them.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )
    app.state.database = database

    setup_exception_handlers(app)

    # Middleware runs in reverse order of registration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.include_router(health_router)
    app.include_router(patients_router)
    app.include_router(exams_router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_RELOAD
    )
