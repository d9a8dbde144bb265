from typing import Any, Callable, List, Type

from fastapi import APIRouter, Body, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from transitdesk.api.deps.request_identity import (
    DEFAULT_ACTOR,
    get_request_email,
    require_operator,
)
from transitdesk.api.responses import render
from transitdesk.core.results import ActionSuccess
from transitdesk.core.workflow import EntityKind
from transitdesk.db.session import get_db
from transitdesk.schemas.request_identity import RequestIdentity
from transitdesk.schemas.workflow import (
    AllowedTransitionsRead,
    HistoryEntryRead,
    StatusTransitionRequest,
)
from transitdesk.services.workflow_service import StatusTransitionService


def create_workflow_router(
    kind: EntityKind,
    create_schema: Type[BaseModel],
    read_schema: Type[BaseModel],
    create_fn: Callable[[Session, Any, str], Any],
    tags: List[str],
) -> APIRouter:
    """
    Router for one workflow-governed document kind:

        POST   ""                   create in the initial status
        GET    /{id}                read
        GET    /{id}/history        status history, oldest first
        GET    /{id}/transitions    statuses reachable from the current one
        POST   /{id}/status         apply a transition (operator roles)
    """
    router = APIRouter(tags=tags)

    @router.post("", status_code=status.HTTP_201_CREATED)
    def create_document(
        payload: create_schema = Body(...),
        db: Session = Depends(get_db),
        actor: str = Depends(get_request_email),
    ):
        return render(create_fn(db, payload, actor), read_schema, status.HTTP_201_CREATED)

    @router.get("/{entity_id}")
    def read_document(entity_id: int, db: Session = Depends(get_db)):
        return render(StatusTransitionService(db).get(kind, entity_id), read_schema)

    @router.get("/{entity_id}/history")
    def read_history(entity_id: int, db: Session = Depends(get_db)):
        return render(StatusTransitionService(db).history(kind, entity_id), HistoryEntryRead)

    @router.get("/{entity_id}/transitions")
    def read_allowed_transitions(entity_id: int, db: Session = Depends(get_db)):
        return render(
            StatusTransitionService(db).allowed_targets(kind, entity_id),
            AllowedTransitionsRead,
        )

    @router.post("/{entity_id}/status")
    def change_status(
        entity_id: int,
        payload: StatusTransitionRequest,
        db: Session = Depends(get_db),
        identity: RequestIdentity = Depends(require_operator),
    ):
        actor = identity.email or DEFAULT_ACTOR
        result = StatusTransitionService(db).apply_transition(kind, entity_id, payload, actor)
        if not result.success:
            return render(result)
        outcome = result.data
        return render(
            ActionSuccess(
                {
                    "from_status": outcome.from_status,
                    "to_status": outcome.to_status,
                    "entity": read_schema.model_validate(outcome.entity).model_dump(mode="json"),
                    "history_entry": HistoryEntryRead.model_validate(
                        outcome.history_entry
                    ).model_dump(mode="json"),
                }
            )
        )

    return router
