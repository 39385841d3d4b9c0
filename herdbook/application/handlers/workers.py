"""Worker register handler. A worker spans its employment row and its login account."""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from herdbook.application.exceptions import RecordNotFoundError
from herdbook.application.handlers.base import RecordHandler
from herdbook.application.repositories import RecordRepository, UnitOfWork
from herdbook.domain.models.records import RecordKind, Worker, WorkerStatus
from herdbook.domain.validators.record_validator import validate_worker_fields
from herdbook.security.passwords import PasswordHasher

ACCOUNT_FIELDS = ("full_name", "email", "phone_number", "role", "status")
EMPLOYMENT_FIELDS = ("id_number", "date_hired", "salary", "assigned_duties")


def username_for(email: str) -> str:
    return email.split("@", 1)[0]


class WorkerHandler(RecordHandler[Worker]):
    """
    Account and employment rows are written in the same unit of work, so a
    worker never exists without its account and account changes never land
    without the worker change that caused them.
    """

    kind = RecordKind.WORKER
    label = "Worker"
    audit_fields = ("full_name", "email", "role", "status", "id_number")

    def __init__(self, password_hasher: PasswordHasher) -> None:
        self._hasher = password_hasher

    def repository(self, uow: UnitOfWork) -> RecordRepository[Worker]:
        return uow.workers

    async def validate(
        self,
        uow: UnitOfWork,
        fields: Mapping[str, Any],
        *,
        current: Optional[Worker],
    ) -> Tuple[Dict[str, Any], List[str]]:
        values, errors = validate_worker_fields(fields, creating=current is None)
        if values["email"] is not None and await uow.user_accounts.email_taken(
            values["email"],
            exclude_user_id=current.user_id if current is not None else None,
        ):
            errors.append("Email already exists")
        if values["id_number"] is not None and await uow.workers.exists(
            id_number=values["id_number"],
            exclude_id=current.id if current is not None else None,
        ):
            errors.append("ID number already exists")
        return values, errors

    def _account_values(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        account = {name: values[name] for name in ACCOUNT_FIELDS}
        if values.get("password"):
            account["password_hash"] = self._hasher.hash(values["password"])
        return account

    async def write_create(self, uow: UnitOfWork, values: Dict[str, Any]) -> Worker:
        account = self._account_values(values)
        account["username"] = username_for(values["email"])
        user_id = await uow.user_accounts.add(account)
        employment = {name: values[name] for name in EMPLOYMENT_FIELDS}
        employment["user_id"] = user_id
        return await uow.workers.add(employment)

    async def write_update(self, uow: UnitOfWork, current: Worker, values: Dict[str, Any]) -> Worker:
        await uow.workers.update(current.id, {name: values[name] for name in EMPLOYMENT_FIELDS})
        await uow.user_accounts.update(current.user_id, self._account_values(values))
        updated = await uow.workers.get(current.id)
        if updated is None:
            raise RecordNotFoundError(f"{self.label} {current.id} not found")
        return updated

    async def write_delete(self, uow: UnitOfWork, current: Worker) -> None:
        await uow.workers.soft_delete(current.id)
        await uow.user_accounts.update(current.user_id, {"status": WorkerStatus.INACTIVE})
