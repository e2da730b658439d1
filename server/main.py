"""Entry point for the drive server."""

import uvicorn
import time
import uuid
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from common.logging_config import setup_logging
from server.config import SERVER_HOST, SERVER_PORT
from server.container import build_container
from server.database import init_database
from server.routes import (
    account_router,
    file_router,
    folder_router,
    public_router,
    recent_router,
    trash_router
)
from server.service_locator import get_container, set_container
from server.exceptions import (
    DriveException,
    UserAlreadyExistsError,
    InvalidCredentialsError,
    InvalidAPIKeyError,
    NotFoundError,
    ForbiddenError,
    InvalidArgumentError,
    RateLimitedError,
    ArchiveStreamError,
    ShareLinkExpiredError,
    UnsupportedPreviewError
)

logger = setup_logging('server')

app = FastAPI(
    title="Drive Server",
    description="Folder-based file storage with sharing, trash and ZIP download",
    version="1.0.0"
)


def error_body(message: str, code: str) -> dict:
    return {"error": True, "message": message, "code": code}


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
    )

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


@app.on_event("startup")
async def startup_event():
    """
    Initialize database and wire the archive pipeline on application startup.
    """
    logger.info("Drive server starting up...")

    init_database()
    logger.info("Database initialized")

    set_container(build_container())
    logger.info("Components initialized")


@app.on_event("shutdown")
async def shutdown_event():
    """
    Let pending observer deliveries finish, then release components.
    """
    logger.info("Drive server shutting down...")

    try:
        await get_container().event_bus.drain()
    except RuntimeError:
        logger.info("No components to shut down")
    else:
        logger.info("Event bus drained")

    set_container(None)


@app.exception_handler(UserAlreadyExistsError)
async def user_already_exists_handler(request: Request, exc: UserAlreadyExistsError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"User already exists error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(str(exc), "USER_ALREADY_EXISTS")
    )


@app.exception_handler(InvalidCredentialsError)
async def invalid_credentials_handler(request: Request, exc: InvalidCredentialsError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Invalid credentials error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=error_body(str(exc), "INVALID_CREDENTIALS")
    )


@app.exception_handler(InvalidAPIKeyError)
async def invalid_api_key_handler(request: Request, exc: InvalidAPIKeyError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Invalid API key error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=error_body(str(exc), "INVALID_API_KEY")
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Not found error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=error_body(str(exc), "NOT_FOUND")
    )


@app.exception_handler(ForbiddenError)
async def forbidden_handler(request: Request, exc: ForbiddenError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Forbidden error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content=error_body(str(exc), "FORBIDDEN")
    )


@app.exception_handler(InvalidArgumentError)
async def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Invalid argument error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(str(exc), "INVALID_ARGUMENT")
    )


@app.exception_handler(RateLimitedError)
async def rate_limited_handler(request: Request, exc: RateLimitedError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Rate limited: {exc} count={exc.count} limit={exc.limit} "
        f"[request_id={request_id}] path={request.url.path}"
    )
    content = error_body(str(exc), "RATE_LIMITED")
    content.update({
        "retry_after_seconds": exc.retry_after_seconds,
        "limit": exc.limit,
        "window_seconds": exc.window_seconds,
    })
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=content,
        headers={"Retry-After": str(exc.retry_after_seconds)}
    )


@app.exception_handler(ShareLinkExpiredError)
async def share_link_expired_handler(request: Request, exc: ShareLinkExpiredError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.info(
        f"Share link expired: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_410_GONE,
        content=error_body(str(exc), "LINK_EXPIRED")
    )


@app.exception_handler(UnsupportedPreviewError)
async def unsupported_preview_handler(request: Request, exc: UnsupportedPreviewError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.info(
        f"Preview refused: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
        content=error_body(str(exc), "UNSUPPORTED_MEDIA_TYPE")
    )


@app.exception_handler(ArchiveStreamError)
async def archive_stream_handler(request: Request, exc: ArchiveStreamError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Archive stream error: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Failed to create zip archive", "STREAM_FAILURE")
    )


@app.exception_handler(DriveException)
async def drive_exception_handler(request: Request, exc: DriveException):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Drive exception: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(str(exc), "INTERNAL_ERROR")
    )


@app.exception_handler(Exception)
async def unexpected_exception_handler(request: Request, exc: Exception):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Unexpected error: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", "INTERNAL_ERROR")
    )


app.include_router(account_router)
app.include_router(folder_router)
app.include_router(file_router)
app.include_router(trash_router)
app.include_router(recent_router)
app.include_router(public_router)


@app.get("/")
async def root():
    """
    Root endpoint for health check.
    """
    return {"message": "Drive Server API", "status": "running"}


@app.get("/health")
async def health_check():
    """
    Health check endpoint for Docker healthcheck.
    Returns 200 if service is alive.
    """
    return {"status": "healthy", "service": "server"}


@app.get("/ready")
async def ready_check():
    """
    Readiness check endpoint.
    Verifies database connectivity and component wiring.
    """
    from server.database import get_db_connection

    try:
        with get_db_connection() as conn:
            conn.execute("SELECT 1")
        db_status = "ok"
    except Exception as e:
        db_status = f"error: {str(e)}"

    try:
        get_container()
        components_status = "ok"
    except RuntimeError as e:
        components_status = f"error: {str(e)}"

    ready = db_status == "ok" and components_status == "ok"
    status_code = status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code=status_code,
        content={
            "ready": ready,
            "database": db_status,
            "components": components_status
        }
    )


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "server.main:app",
        host=SERVER_HOST,
        port=SERVER_PORT
    )


if __name__ == "__main__":
    main()
