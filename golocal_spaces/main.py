# golocal_spaces/main.py

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from golocal_spaces.config import ALLOWED_ORIGINS
from golocal_spaces.errors import MarketplaceError
from golocal_spaces.logging_config import setup_logging
from golocal_spaces.middleware import RequestIDMiddleware
from golocal_spaces.routes.bookings import router as bookings_router
from golocal_spaces.routes.health import router as health_router
from golocal_spaces.routes.metrics import router as metrics_router
from golocal_spaces.routes.notifications import router as notifications_router
from golocal_spaces.routes.payouts import router as payouts_router
from golocal_spaces.routes.spaces import router as spaces_router
from golocal_spaces.routes.uploads import router as uploads_router
from golocal_spaces.routes.users import router as users_router
from golocal_spaces.routes.webhook import router as webhook_router

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)

API_PREFIX = "/api/v1"

app = FastAPI(
    title="GoLocal Spaces API",
    description="Marketplace API for listing and booking short-term commercial spaces",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": code, "message": message},
    )


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "request_failed",
        path=request.url.path,
        status_code=exc.status_code,
        error=exc.code,
        message=exc.message,
    )
    return error_response(exc.status_code, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    logger.info("request_validation_failed", path=request.url.path, errors=len(errors))
    return error_response(status.HTTP_400_BAD_REQUEST, "validation_error", message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = "internal_error" if exc.status_code >= 500 else "http_error"
    return error_response(exc.status_code, code, str(exc.detail))


# Register routers
app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(users_router, prefix=API_PREFIX, tags=["Users"])
app.include_router(spaces_router, prefix=API_PREFIX, tags=["Spaces"])
app.include_router(bookings_router, prefix=API_PREFIX, tags=["Bookings"])
app.include_router(payouts_router, prefix=API_PREFIX, tags=["Payouts"])
app.include_router(notifications_router, prefix=API_PREFIX, tags=["Notifications"])
app.include_router(uploads_router, prefix=API_PREFIX, tags=["Uploads"])
app.include_router(webhook_router, prefix=API_PREFIX, tags=["Webhooks"])
