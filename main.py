from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.datastructures import MutableHeaders
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
from infrastructure import create_scheduler, get_upload_limiter, get_move_limiter
from routes import grids_router, games_router
from services import get_vision_client

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'self'; style-src 'self' 'unsafe-inline'; img-src 'self' data:; connect-src 'self'",
}


class SecurityHeadersMiddleware:
    """Add the standard security headers to every HTTP response, streams included."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for key, value in SECURITY_HEADERS.items():
                    headers[key] = value
            await send(message)

        await self.app(scope, receive, send_with_headers)


# --- Lifespan: vision client and background jobs ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    if get_vision_client() is None:
        logger.warning("GCP_PROJECT_ID not set, image analysis disabled")

    scheduler = create_scheduler([get_upload_limiter(), get_move_limiter()])
    scheduler.start()
    logger.info(f"Server ready on http://localhost:{config.PORT}")
    try:
        yield
    finally:
        scheduler.shutdown(wait=False)


# --- FastAPI setup ---
app = FastAPI(lifespan=lifespan)

# --- Middleware ---
app.add_middleware(SecurityHeadersMiddleware)


# --- Error responses: always {"error": "<message>"} ---
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = "Requête invalide"
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = first.get("loc") or ()
        if first.get("type") == "missing" and len(loc) > 1:
            message = f"Champ '{loc[-1]}' requis"
    return JSONResponse({"error": message}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    # Rendered by the outermost error middleware, which SecurityHeadersMiddleware does not wrap.
    return JSONResponse({"error": "Erreur interne"}, status_code=500, headers=SECURITY_HEADERS)


@app.get("/api/health", include_in_schema=False)
async def health():
    return {"status": "ok"}


# --- Register routes ---
app.include_router(grids_router)
app.include_router(games_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT)
