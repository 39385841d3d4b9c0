"""API middleware: correlation ID, actor context, request audit line."""

import json
import logging
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from herdbook.core.context import actor_id_ctx, correlation_id_ctx
from herdbook.security.actor_context import UNKNOWN_ORIGIN, Actor, OriginMeta
from herdbook.security.rbac import Role

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
ACTOR_ID_HEADER = "X-Actor-ID"
ACTOR_ROLE_HEADER = "X-Actor-Role"
ACTOR_NAME_HEADER = "X-Actor-Name"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Generate or preserve correlation ID; attach to request.state, response header, and logging context."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        correlation_id_ctx.set(correlation_id)

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class ActorContextMiddleware(BaseHTTPMiddleware):
    """
    Read the authenticated actor from trusted upstream headers into request.state.actor.
    No actor headers means an anonymous request (every mutation is denied).
    A malformed actor is rejected with 400 before any route runs.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        raw_id = (request.headers.get(ACTOR_ID_HEADER) or "").strip()
        raw_role = (request.headers.get(ACTOR_ROLE_HEADER) or "").strip()
        actor = None
        if raw_id or raw_role:
            if not raw_id.isdigit():
                return JSONResponse(
                    status_code=400,
                    content={"detail": f"{ACTOR_ID_HEADER} header must be a positive integer"},
                )
            try:
                role = Role(raw_role.lower())
            except ValueError:
                return JSONResponse(
                    status_code=400,
                    content={"detail": f"{ACTOR_ROLE_HEADER} header is not a known role"},
                )
            display_name = (request.headers.get(ACTOR_NAME_HEADER) or "").strip() or raw_id
            actor = Actor(actor_id=int(raw_id), display_name=display_name, role=role)
            actor_id_ctx.set(actor.actor_id)

        request.state.actor = actor
        request.state.origin = OriginMeta(
            ip_address=request.client.host if request.client else UNKNOWN_ORIGIN,
            user_agent=request.headers.get("user-agent") or UNKNOWN_ORIGIN,
        )
        return await call_next(request)


class RequestAuditMiddleware(BaseHTTPMiddleware):
    """After response: log one structured line per request (correlation_id, actor_id, path, method, status_code)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        actor = getattr(request.state, "actor", None)
        audit_event = {
            "event": "request_audit",
            "correlation_id": getattr(request.state, "correlation_id", None),
            "actor_id": actor.actor_id if actor is not None else None,
            "path": request.url.path,
            "method": request.method,
            "status_code": response.status_code,
        }
        logger.info(json.dumps(audit_event))
        return response
