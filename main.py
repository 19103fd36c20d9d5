from fastapi import FastAPI, Request, status
from fastapi.responses import RedirectResponse
from starlette.middleware.sessions import SessionMiddleware
from contextlib import asynccontextmanager

from hvac_console.core.config import settings
from hvac_console.core.deps import LoginRequired
from hvac_console.core.logging_config import RequestContextMiddleware, get_logger, setup_logging
from hvac_console.core.security import clear_login
from hvac_console.core.templating import render
from hvac_console.api.endpoints import auth, customers, dashboard, health, jobs, technicians
from hvac_console.services.api_client import ApiError, SessionExpiredError, create_http_client

setup_logging(log_level=settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info(f"Starting up {settings.PROJECT_NAME}...")
    logger.info(f"Backend API root: {settings.api_root}")
    if getattr(app.state, "http_client", None) is None:
        app.state.http_client = create_http_client()

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.PROJECT_NAME}...")
    await app.state.http_client.aclose()
    app.state.http_client = None


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Admin console for HVAC customers, technicians and jobs",
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
)

# Added first so it runs inside SessionMiddleware
app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE,
    max_age=settings.SESSION_MAX_AGE_SECONDS,
    same_site="lax",
    https_only=settings.SESSION_HTTPS_ONLY,
)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    """Private pages send anonymous visitors to the login page"""
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)


@app.exception_handler(SessionExpiredError)
async def session_expired_handler(request: Request, exc: SessionExpiredError):
    """Backend rejected the token: forget it and force a new login"""
    logger.info(f"Session expired on {request.url.path}, redirecting to login")
    clear_login(request.session)
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    """Backend failures that escaped a page handler"""
    logger.error(f"Unhandled backend error on {request.url.path}: {exc.message}")
    return render(
        request,
        "error.html",
        {"message": "Request failed. Please try again."},
        status_code=status.HTTP_502_BAD_GATEWAY,
    )


# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(dashboard.router)
app.include_router(jobs.router)
app.include_router(customers.router)
app.include_router(technicians.router)


@app.get("/")
async def root():
    """Root endpoint - the console opens on the dashboard"""
    return RedirectResponse("/dashboard", status_code=status.HTTP_303_SEE_OTHER)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload during development
        log_level="info"
    )
