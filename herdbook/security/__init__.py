"""Security: actor context, RBAC, password hashing. No FastAPI."""

from herdbook.security.actor_context import Actor, OriginMeta, RequestContext
from herdbook.security.passwords import PasswordHasher
from herdbook.security.rbac import RBACService, Role, is_allowed

__all__ = [
    "Actor",
    "OriginMeta",
    "PasswordHasher",
    "RBACService",
    "RequestContext",
    "Role",
    "is_allowed",
]
