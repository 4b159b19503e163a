"""
Main FastAPI application
Quiz API for the Telegram Web App, the built front-end, and the Telegram bot
"""
from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from pathlib import Path
import logging
import sys
import time

from quizbot import messages
from quizbot.config import settings, validate_bot_token, ConfigurationError
from quizbot.database import SessionLocal, init_db
from quizbot.api import quizzes
from quizbot.utils.rate_limiter import rate_limiter

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
# Bot long polling logs every request at INFO
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Quiz API for the Telegram Web App",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Rate limiting middleware
@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    """Apply rate limiting to API requests"""

    # Static front-end and health checks are not limited
    if not request.url.path.startswith("/api/"):
        return await call_next(request)

    try:
        await rate_limiter.check_rate_limit(request)
    except HTTPException as e:
        return JSONResponse(
            status_code=e.status_code,
            content={"error": e.detail}
        )

    return await call_next(request)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing"""

    start_time = time.time()

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Duration: {duration:.3f}s"
    )

    return response


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors gracefully"""

    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

    content = {"error": messages.INTERNAL_ERROR}
    if settings.DEBUG:
        content["detail"] = str(exc)

    return JSONResponse(status_code=500, content=content)


# HTTP exception handler
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Format HTTP exceptions as {"error": ...}"""

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail}
    )


# Validation error handler
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Format request validation failures as {"error": ...}"""

    logger.info(f"Invalid request {request.method} {request.url.path}: {exc.errors()}")

    return JSONResponse(
        status_code=422,
        content={"error": messages.INVALID_REQUEST}
    )


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": time.time()
    }


# Include routers
app.include_router(quizzes.router)


def resolve_static_file(dist_dir: Path, requested: str) -> Path:
    """
    Map a request path onto the built front-end

    Unknown paths fall back to index.html so the client-side router can
    handle them. Paths escaping dist_dir are treated as unknown.
    """
    root = dist_dir.resolve()
    candidate = (root / requested).resolve()

    if requested and candidate.is_file() and root in candidate.parents:
        return candidate
    return root / "index.html"


# Web App front-end (registered last so API routes take precedence)
@app.get("/{full_path:path}", include_in_schema=False)
async def serve_web_app(full_path: str):
    if full_path == "api" or full_path.startswith("api/"):
        raise HTTPException(status_code=404, detail="Not Found")

    dist_dir = Path(settings.WEB_APP_DIST_DIR)
    index_file = dist_dir / "index.html"
    if not index_file.is_file():
        raise HTTPException(status_code=404, detail="Web App is not built")

    return FileResponse(resolve_static_file(dist_dir, full_path))


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize database and start the Telegram bot"""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {str(e)}")
        raise

    if not Path(settings.WEB_APP_DIST_DIR, "index.html").is_file():
        logger.warning(f"Web App build not found in {settings.WEB_APP_DIST_DIR}; only the API is served")

    validate_bot_token(settings.TELEGRAM_BOT_TOKEN)

    # Imported here so the HTTP app can be used without the bot stack loaded
    from quizbot.bot.application import build_application

    bot_application = build_application(settings, SessionLocal)
    await bot_application.initialize()
    await bot_application.start()
    await bot_application.updater.start_polling(drop_pending_updates=True)
    app.state.bot_application = bot_application

    logger.info("Telegram bot started")
    logger.info("Application startup complete")


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    """Stop the Telegram bot"""
    logger.info("Shutting down application")

    bot_application = getattr(app.state, "bot_application", None)
    if bot_application is not None:
        await bot_application.updater.stop()
        await bot_application.stop()
        await bot_application.shutdown()
        logger.info("Telegram bot stopped")


def run() -> None:
    """Console entry point: validate configuration, then serve HTTP and the bot"""
    try:
        validate_bot_token(settings.TELEGRAM_BOT_TOKEN)
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    import uvicorn
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
    )


if __name__ == "__main__":
    run()
