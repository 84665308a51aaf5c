import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from pocketcloset import __version__
from pocketcloset.config import settings
from pocketcloset.core import configure_logging, correlation_id_var, register_exception_handlers
from pocketcloset.database import engine, init_db
from pocketcloset.routers import auth, events, garments, outfits, trips, users, utils
from pocketcloset.schemas import HealthResponse
from pocketcloset.utils.cloudinary_helper import get_cloudinary_status, initialize_cloudinary

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="PocketCloset API",
    description="Backend API for PocketCloset wardrobe, outfit and trip management",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID"],
)

app.state.limiter = auth.limiter
register_exception_handlers(app)


@app.middleware("http")
async def correlation_id_middleware(request: Request, call_next):
    """Tag the request with a correlation id and log its start and end."""
    correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
    token = correlation_id_var.set(correlation_id)
    started = time.perf_counter()
    try:
        logger.info(f"RequestReceived {request.method} {request.url.path}")
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"ResponseSent {request.method} {request.url.path} "
            f"status={response.status_code} duration={elapsed_ms:.1f}ms"
        )
        response.headers["X-Correlation-ID"] = correlation_id
        return response
    finally:
        correlation_id_var.reset(token)


@app.on_event("startup")
async def on_startup() -> None:
    init_db()
    initialize_cloudinary()
    logger.info(f"PocketCloset API started ({settings.ENVIRONMENT})")


for module in (auth, users, garments, outfits, events, trips, utils):
    app.include_router(module.router, prefix="/api")


@app.get("/health", response_model=HealthResponse)
@app.head("/health")
def health_check():
    """Liveness plus a quick database probe; never fails the check itself."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        database = "connected"
    except Exception as e:
        logger.warning(f"Health check database probe failed: {e}")
        database = "unavailable"

    return HealthResponse(status="ok", database=database, storage=get_cloudinary_status())


@app.get("/")
async def root():
    return {"message": "Welcome to PocketCloset API", "version": __version__, "docs": "/docs"}
