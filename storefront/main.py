# storefront/main.py
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .catalog.router import router as catalog_router
from .config import Settings, get_settings
from .errors import ConfigError, SeedingError, StorefrontError
from .purchase.router import router as purchase_router
from .purchase.stripe_service import PaymentProcessor, StripeCheckout
from .storage import CatalogStore


logger = logging.getLogger(__name__)

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", "Authorization"]
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ", ".join(ALLOWED_METHODS),
    "Access-Control-Allow-Headers": ", ".join(ALLOWED_HEADERS),
}

LOG_LINE_LIMIT = 80


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Validate configuration and prepare the store before serving."""
    settings: Settings = app.state.settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings.validate()
    except ConfigError as exc:
        logger.critical("Configuration invalid: %s", exc)
        raise
    app.state.settings = settings

    if app.state.processor is None:
        app.state.processor = StripeCheckout(settings.stripe_secret_key)

    if settings.seed_on_startup:
        try:
            app.state.store.initialize()
        except SeedingError:
            # Left uninitialized; the next request retries the seed.
            logger.warning("Initial catalog seeding failed, will retry on first access")

    yield


async def handle_storefront_error(request: Request, exc: StorefrontError) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(level, "[%s] %s: %s", request_id, exc.kind, exc.message)

    body = {"error": exc.message}
    if exc.status_code >= 500 and request_id:
        body["requestId"] = request_id
    return JSONResponse(status_code=exc.status_code, content=body)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        details.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    message = "Invalid request body"
    if details:
        message += " (" + "; ".join(details) + ")"
    logger.warning(
        "[%s] validation_error: %s", getattr(request.state, "request_id", None), message
    )
    return JSONResponse(status_code=400, content={"error": message})


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework errors (unknown route, bad method, unparsable body) as ``{"error": ...}``."""
    logger.warning(
        "[%s] http_error %s: %s",
        getattr(request.state, "request_id", None),
        exc.status_code,
        exc.detail,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def log_requests(request: Request, call_next) -> Response:
    request_id = uuid.uuid4().hex[:8]
    request.state.request_id = request_id
    start = time.perf_counter()

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    path = request.url.path
    if not path.startswith("/api"):
        return response

    body = b"".join([chunk async for chunk in response.body_iterator])
    duration_ms = int((time.perf_counter() - start) * 1000)
    line = f"{request.method} {path} {response.status_code} in {duration_ms}ms"
    if body and response.headers.get("content-type", "").startswith("application/json"):
        line += f" :: {body.decode('utf-8', errors='replace')}"
    if len(line) > LOG_LINE_LIMIT:
        line = line[: LOG_LINE_LIMIT - 1] + "…"
    logger.info("[%s] %s", request_id, line)

    rebuilt = Response(content=body, status_code=response.status_code)
    # Keep repeated headers (Set-Cookie, Vary ...) as separate entries.
    rebuilt.raw_headers = [
        (name, value) for name, value in response.raw_headers if name != b"content-length"
    ] + [(name, value) for name, value in rebuilt.raw_headers if name == b"content-length"]
    return rebuilt


async def answer_options(request: Request, call_next) -> Response:
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    return await call_next(request)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[CatalogStore] = None,
    processor: Optional[PaymentProcessor] = None,
) -> FastAPI:
    app = FastAPI(
        title="Storefront API",
        description=(
            "Album catalog and purchase intents for the artist storefront. "
            "Payments are completed on Stripe's hosted checkout page."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store or CatalogStore()
    app.state.processor = processor

    app.include_router(catalog_router)
    app.include_router(purchase_router)

    app.add_exception_handler(StorefrontError, handle_storefront_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)

    # Last added runs first: OPTIONS is answered before logging and routing.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
    )
    app.middleware("http")(log_requests)
    app.middleware("http")(answer_options)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "albums": app.state.store.album_count()}

    return app


app = create_app()
