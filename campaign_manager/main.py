"""Application entrypoint.

Centralized settings + structured logging + the shared campaign cache.
"""
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import logging
import uvicorn

from campaign_manager.auth import auth_routes
from campaign_manager.core.cache import TTLCache
from campaign_manager.core.errors import register_exception_handlers
from campaign_manager.core.logging_config import configure_logging
from campaign_manager.core.metrics import REQUEST_COUNT, REQUEST_LATENCY
from campaign_manager.core.settings import settings
from campaign_manager.database.init_db import initialize_database
from campaign_manager.middleware.rate_limit import limiter, _rate_limit_exceeded_handler
from campaign_manager.routes import campaign_routes, lead_routes, message_routes

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version="v1", openapi_tags=[
    {"name": "auth", "description": "Authentication & user management"},
    {"name": "campaigns", "description": "Campaign lifecycle"},
    {"name": "leads", "description": "Scraped LinkedIn profiles"},
    {"name": "messages", "description": "Personalized outreach messages"},
])

# One cache for the whole process; handlers reach it through routes.dependencies.get_cache.
app.state.cache = TTLCache(default_ttl=settings.campaign_cache_ttl_seconds)

# Attach rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

register_exception_handlers(app)

@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    path = request.url.path
    method = request.method
    with REQUEST_LATENCY.labels(path=path).time():
        response = await call_next(request)
    REQUEST_COUNT.labels(method=method, path=path, status=response.status_code).inc()
    return response

# Create database tables on startup
@app.on_event("startup")
def startup():
    """Ensures tables and indexes exist (and seeds sample data when enabled)."""
    initialize_database(seed=settings.seed_sample_data)
    logger.info("Database tables created/checked.")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.cors_allow_origins.split(',')],
    allow_credentials=True,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Include routers
app.include_router(auth_routes.router, prefix="/api/auth", tags=["auth"])
app.include_router(campaign_routes.router, prefix="/api/campaigns", tags=["campaigns"])
app.include_router(lead_routes.router, prefix="/api/leads", tags=["leads"])
app.include_router(message_routes.router, prefix="/api/personalized-message", tags=["messages"])

@app.get("/")
async def root():
    """Root endpoint for the API."""
    return {"message": "Campaign Manager API is running", "version": app.version}

@app.get("/health")
def health():
    return {"status": "ok", "cache_entries": len(app.state.cache)}

@app.get("/metrics")
def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


def run():
    uvicorn.run("campaign_manager.main:app", host="0.0.0.0", port=8000)
