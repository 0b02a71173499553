"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ado_assistant.api.deps import container
from ado_assistant.api.v1 import analyze, capacity, health, work_items
from ado_assistant.core.config import settings
from ado_assistant.core.constants import API_PREFIX, APP_VERSION
from ado_assistant.core.exceptions import AssistantError
from ado_assistant.core.logging import bind_context, clear_context, get_logger, setup_logging
from ado_assistant.core.security import generate_request_id

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info(
        "Starting ADO AI assistant",
        app_name=settings.app_name,
        env=settings.app_env,
        port=settings.port,
    )
    container.initialize()

    yield

    logger.info("Shutting down ADO AI assistant")
    await container.shutdown()


# Create FastAPI application
app = FastAPI(
    title="ADO AI Assistant API",
    description="Generation and work item proxy for the Azure DevOps AI assistant extension",
    version=APP_VERSION,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)

# CORS for the Azure DevOps extension frames
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.security.allowed_origins,
    allow_origin_regex=settings.security.allowed_origin_regex,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def request_context(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Bind a request id to every log entry of the request."""
    request_id = generate_request_id()
    bind_context(request_id=request_id, path=request.url.path)
    try:
        response = await call_next(request)
    finally:
        clear_context()
    response.headers["X-Request-ID"] = request_id
    return response


# Exception handlers
@app.exception_handler(AssistantError)
async def assistant_error_handler(
    request: Request,
    exc: AssistantError,
) -> JSONResponse:
    """Handle application errors."""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "Application error",
        error_code=exc.code,
        error_message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report body and parameter validation failures as 400."""
    logger.warning(
        "Invalid input",
        path=request.url.path,
        errors=[".".join(str(part) for part in e.get("loc", ())) for e in exc.errors()],
    )
    return JSONResponse(status_code=400, content={"error": "Invalid input"})


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unexpected errors."""
    logger.exception(
        "Unexpected error",
        error=str(exc),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=500,
        content={"error": "An unexpected error occurred"},
    )


# Include routers
app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])
app.include_router(analyze.router, prefix=API_PREFIX, tags=["Analyze"])
app.include_router(work_items.router, prefix=API_PREFIX, tags=["Work Items"])
app.include_router(capacity.router, prefix=API_PREFIX, tags=["Capacity"])


# Root endpoint
@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": APP_VERSION,
        "docs": "/docs" if settings.debug else "Disabled in production",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ado_assistant.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
    )
