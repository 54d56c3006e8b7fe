from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from timing_asgi import TimingMiddleware, TimingClient  # type: ignore
from timing_asgi.integrations import StarletteScopeToName  # type: ignore

from app.core import config
from app.features.permissions.dependencies import get_permission_engine
from app.features.permissions.routes import router as permission_router
from app.features.notifications.dependencies import get_deadline_engine
from app.features.notifications.routes import router as notification_router
from app.features.users.dependencies import get_authorization_header
from app.utils import get_logger


log = get_logger(__name__)

METRIC_PREFIX = "alerts"

app = FastAPI(
    title="Clinic Access & Deadline Alerts",
    description="Role-based permission checks and deadline notifications",
    version="0.1.0",
    docs_url="/docs" if config.ENABLE_DOCS else None,
    redoc_url="/redoc" if config.ENABLE_DOCS else None,
    openapi_url="/openapi.json" if config.ENABLE_DOCS else None
)
app.state.limiter = Limiter(key_func=get_authorization_header)


class RouteTimingLogger(TimingClient):
    """Logs per-route handler timings, keyed by feature and route function."""

    def timing(self, metric_name, timing, tags):
        route = metric_name.removeprefix(f"{METRIC_PREFIX}.app.features.")
        log.debug("Route %s took %.4fs %s", route, timing, tags)


app.add_middleware(
    TimingMiddleware,
    client=RouteTimingLogger(),
    metric_namer=StarletteScopeToName(METRIC_PREFIX, app),
)

if config.ALLOW_ORIGIN:
    log.warning("Setting allow origin to %s", config.ALLOW_ORIGIN)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.ALLOW_ORIGIN],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError):
    """Flatten validation errors to {"field.path": message}, e.g. "entities.0.status"."""
    errors = {}
    for error in exc.errors():
        if "loc" not in error or "msg" not in error:
            continue
        path = [str(part) for part in error["loc"] if part != "body"]
        errors[".".join(path) or "root"] = error["msg"]
    log.info("Request validation error %s", errors)
    return JSONResponse(status_code=400, content=jsonable_encoder(errors))


@app.exception_handler(RateLimitExceeded)
def rate_limit_exceeded_handler(_request: Request, _exc: RateLimitExceeded) -> Response:
    return JSONResponse({"error": "You are going too fast"}, status_code=429)


@app.on_event("startup")
async def startup():
    """Load the role grant table and deadline engine; a bad grant file stops startup."""
    if config.ENABLE_DOCS:
        log.warning("Docs enabled")
    if not config.JWT_SECRET:
        log.warning("JWT_SECRET is not set - all authenticated requests will be rejected")
    get_permission_engine()
    get_deadline_engine()
    log.info("Engines initialized successfully")


@app.get("/")
async def root():
    """Root endpoint - API health check."""
    return {
        "message": "Clinic Access & Deadline Alerts API",
        "version": "0.1.0",
        "status": "online",
        "docs": "/docs" if config.ENABLE_DOCS else None,
        "authentication": {
            "info": "Protected endpoints require Bearer token with 'sub' and 'role' claims",
            "protected_endpoints": ["/permissions/*", "/notifications/*"],
            "public_endpoints": ["/", "/health"]
        },
        "features": {
            "permissions": "Static role-based access control with action wildcards",
            "notifications": "Deadline alerts at {} days remaining, each sent once, with email fan-out".format(
                ", ".join(str(t) for t in sorted(config.DEADLINE_THRESHOLDS, reverse=True))
            )
        }
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


# Permission routes (RBAC)
app.include_router(permission_router, prefix="/permissions", tags=["permissions"])

# Notification routes
app.include_router(notification_router, prefix="/notifications", tags=["notifications"])
