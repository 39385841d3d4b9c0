"""Record API routers: POST /, PUT /{record_id}, DELETE /{record_id} for each record kind."""

from typing import Annotated, Dict, Optional, Tuple, Type

from fastapi import APIRouter, Depends, Query, status

from herdbook.api.dependencies import get_record_service, get_request_context
from herdbook.application.record_service import MutationResult, RecordMutationService
from herdbook.domain.models.records import RecordKind
from herdbook.domain.schemas.records import (
    BreedingRecordFields,
    CattleFields,
    FeedFields,
    HealthRecordFields,
    MutationResponse,
    RecordFields,
    WorkerFields,
)
from herdbook.security.actor_context import RequestContext

# URL prefix -> (kind, request body schema)
RECORD_ROUTES: Dict[str, Tuple[RecordKind, Type[RecordFields]]] = {
    "/cattle": (RecordKind.CATTLE, CattleFields),
    "/health-records": (RecordKind.HEALTH_RECORD, HealthRecordFields),
    "/breeding-records": (RecordKind.BREEDING_RECORD, BreedingRecordFields),
    "/feed": (RecordKind.FEED, FeedFields),
    "/workers": (RecordKind.WORKER, WorkerFields),
}


def _to_response(result: MutationResult) -> MutationResponse:
    return MutationResponse(
        kind=result.kind,
        action=result.action,
        record_id=result.record_id,
        message=result.message,
        version=result.version,
    )


def build_record_router(kind: RecordKind, fields_model: Type[RecordFields]) -> APIRouter:
    """One router per kind. Errors propagate to the app-level exception handlers."""
    router = APIRouter(tags=[kind.value])

    @router.post("/", response_model=MutationResponse, status_code=status.HTTP_201_CREATED)
    async def create_record(
        body: fields_model,
        ctx: Annotated[RequestContext, Depends(get_request_context)],
        service: Annotated[RecordMutationService, Depends(get_record_service)],
    ):
        result = await service.create(ctx, kind, body.to_fields())
        return _to_response(result)

    @router.put("/{record_id}", response_model=MutationResponse)
    async def update_record(
        record_id: int,
        body: fields_model,
        ctx: Annotated[RequestContext, Depends(get_request_context)],
        service: Annotated[RecordMutationService, Depends(get_record_service)],
        expected_version: Annotated[Optional[int], Query(ge=1)] = None,
    ):
        """Pass expected_version to fail with 409 if the record changed since it was read."""
        result = await service.update(ctx, kind, record_id, body.to_fields(), expected_version)
        return _to_response(result)

    @router.delete("/{record_id}", response_model=MutationResponse)
    async def delete_record(
        record_id: int,
        ctx: Annotated[RequestContext, Depends(get_request_context)],
        service: Annotated[RecordMutationService, Depends(get_record_service)],
    ):
        result = await service.delete(ctx, kind, record_id)
        return _to_response(result)

    return router
