"""Role-based access control. Flat per-operation allow-sets. No FastAPI."""

from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from herdbook.domain.models.records import Operation, RecordKind
from herdbook.security.exceptions import AuthorizationError


class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    VET = "vet"
    WORKER = "worker"
    MILKER = "milker"


_MANAGEMENT: FrozenSet[Role] = frozenset({Role.ADMIN, Role.MANAGER})
_VETERINARY: FrozenSet[Role] = frozenset({Role.ADMIN, Role.VET})
_ADMIN_ONLY: FrozenSet[Role] = frozenset({Role.ADMIN})

# Permission matrix (same set for create, update and delete):
# Kind             admin  manager  vet  worker  milker
# cattle           ✓      ✓        ✗    ✗       ✗
# health_record    ✓      ✗        ✓    ✗       ✗
# breeding_record  ✓      ✗        ✓    ✗       ✗
# feed             ✓      ✓        ✗    ✗       ✗
# worker           ✓      ✗        ✗    ✗       ✗
_KIND_ROLES: Dict[RecordKind, FrozenSet[Role]] = {
    RecordKind.CATTLE: _MANAGEMENT,
    RecordKind.HEALTH_RECORD: _VETERINARY,
    RecordKind.BREEDING_RECORD: _VETERINARY,
    RecordKind.FEED: _MANAGEMENT,
    RecordKind.WORKER: _ADMIN_ONLY,
}

OPERATION_PERMISSIONS: Dict[Tuple[RecordKind, Operation], FrozenSet[Role]] = {
    (kind, operation): roles
    for kind, roles in _KIND_ROLES.items()
    for operation in Operation
}


def is_allowed(required_role: Role, actor_role: Role) -> bool:
    """Flat membership test: a role satisfies only itself. Admin does not inherit other roles."""
    return required_role == actor_role


def allowed_roles(kind: RecordKind, operation: Operation) -> FrozenSet[Role]:
    return OPERATION_PERMISSIONS.get((kind, operation), frozenset())


class RBACService:
    """Check permission for an actor role on a (kind, operation). Raise AuthorizationError if denied."""

    def is_permitted(self, role: Optional[Role], kind: RecordKind, operation: Operation) -> bool:
        if role is None:
            return False
        return any(is_allowed(required, role) for required in allowed_roles(kind, operation))

    def check_permission(self, role: Optional[Role], kind: RecordKind, operation: Operation) -> None:
        """Raises AuthorizationError if role is absent or not in the operation's allow-set."""
        if role is None:
            raise AuthorizationError("Authentication required")
        if not self.is_permitted(role, kind, operation):
            raise AuthorizationError(
                f"Role {role.value} does not have permission to {operation.value} {kind.value} records"
            )
