"""Request-scoped actor context. Explicit object passed into every service call; no globals."""

from dataclasses import dataclass, field
from typing import Optional, Protocol

from herdbook.security.rbac import Role

UNKNOWN_ORIGIN = "Unknown"


@dataclass(frozen=True)
class Actor:
    """Authenticated principal. Immutable for the lifetime of a request."""

    actor_id: int
    display_name: str
    role: Role


@dataclass(frozen=True)
class OriginMeta:
    """Where a request came from, recorded on every audit entry."""

    ip_address: str = UNKNOWN_ORIGIN
    user_agent: str = UNKNOWN_ORIGIN


@dataclass(frozen=True)
class RequestContext:
    """Everything the record service needs to know about the caller."""

    actor: Optional[Actor]
    origin: OriginMeta = field(default_factory=OriginMeta)
    correlation_id: Optional[str] = None

    @property
    def actor_id(self) -> Optional[int]:
        return self.actor.actor_id if self.actor is not None else None

    @property
    def role(self) -> Optional[Role]:
        return self.actor.role if self.actor is not None else None


class ActorContextProvider(Protocol):
    """Resolves the current authenticated actor. None means deny all."""

    def current_actor(self) -> Optional[Actor]:
        ...
