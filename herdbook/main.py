# herdbook/main.py

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from herdbook.api.middleware import (
    ActorContextMiddleware,
    CorrelationIdMiddleware,
    RequestAuditMiddleware,
)
from herdbook.api.routers import health, metrics
from herdbook.api.routers.records import RECORD_ROUTES, build_record_router
from herdbook.application.exceptions import (
    ApplicationError,
    PersistenceError,
    RecordNotFoundError,
    StaleRecordError,
)
from herdbook.config.logging import configure_logging
from herdbook.config.settings import get_settings
from herdbook.domain.exceptions import DomainError, DomainValidationError
from herdbook.security.exceptions import AuthorizationError

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
)

# Middleware order: last added runs first (outermost). Request flow: CorrelationId -> ActorContext -> RequestAudit.
app.add_middleware(RequestAuditMiddleware)
app.add_middleware(ActorContextMiddleware)
app.add_middleware(CorrelationIdMiddleware)


@app.exception_handler(AuthorizationError)
async def authorization_error_handler(request, exc: AuthorizationError):
    return JSONResponse(status_code=403, content={"detail": exc.message})


@app.exception_handler(DomainValidationError)
async def domain_validation_error_handler(request, exc: DomainValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.message, "errors": exc.errors})


@app.exception_handler(DomainError)
async def domain_error_handler(request, exc: DomainError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(RecordNotFoundError)
async def record_not_found_error_handler(request, exc: RecordNotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(StaleRecordError)
async def stale_record_error_handler(request, exc: StaleRecordError):
    return JSONResponse(status_code=409, content={"detail": exc.message})


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request, exc: PersistenceError):
    # The cause was logged by the service; only the generic message leaves the process
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(ApplicationError)
async def application_error_handler(request, exc: ApplicationError):
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request, exc: Exception):
    logger.error("unhandled_error", extra={"error": str(exc), "path": request.url.path})
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Routers: /health, /metrics, /cattle, /health-records, /breeding-records, /feed, /workers
app.include_router(health.router)
app.include_router(metrics.router)
for prefix, (kind, fields_model) in RECORD_ROUTES.items():
    app.include_router(build_record_router(kind, fields_model), prefix=prefix)
