from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from transitdesk.api.deps.request_identity import DEFAULT_ACTOR, require_operator
from transitdesk.api.responses import render
from transitdesk.core.errors import DUPLICATE_TARIFF, NOT_FOUND
from transitdesk.core.results import ActionFailure, ActionSuccess
from transitdesk.crud import transport_rate as crud
from transitdesk.db.session import get_db
from transitdesk.schemas.request_identity import RequestIdentity
from transitdesk.schemas.transport_rate import (
    TransportRateCreate,
    TransportRateRead,
    TransportRateUpdate,
)

router = APIRouter()


def _not_found(rate_id: int) -> ActionFailure:
    return ActionFailure(
        error=f"Transport rate {rate_id} not found.",
        code=NOT_FOUND,
        status_code=404,
    )


@router.get("")
def list_transport_rates(
    origin_country_code: Optional[str] = Query(default=None, min_length=2, max_length=2),
    destination_country_code: Optional[str] = Query(default=None, min_length=2, max_length=2),
    transport_mode: Optional[str] = None,
    is_active: Optional[bool] = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    rows = crud.list_transport_rates(
        db,
        skip=skip,
        limit=limit,
        origin_country_code=origin_country_code,
        destination_country_code=destination_country_code,
        transport_mode=transport_mode,
        is_active=is_active,
    )
    return render(ActionSuccess(rows), TransportRateRead)


@router.get("/{rate_id}")
def read_transport_rate(rate_id: int, db: Session = Depends(get_db)):
    obj = crud.get_transport_rate(db, rate_id)
    if obj is None:
        return render(_not_found(rate_id))
    return render(ActionSuccess(obj), TransportRateRead)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_transport_rate(
    payload: TransportRateCreate,
    db: Session = Depends(get_db),
    identity: RequestIdentity = Depends(require_operator),
):
    try:
        obj = crud.create_transport_rate(db, payload, identity.email or DEFAULT_ACTOR)
    except crud.DuplicateError as exc:
        return render(
            ActionFailure(
                error=str(exc),
                code=DUPLICATE_TARIFF,
                field="transport_mode",
                status_code=409,
            )
        )
    return render(ActionSuccess(obj), TransportRateRead, status.HTTP_201_CREATED)


@router.patch("/{rate_id}")
def update_transport_rate(
    rate_id: int,
    payload: TransportRateUpdate,
    db: Session = Depends(get_db),
    identity: RequestIdentity = Depends(require_operator),
):
    obj = crud.update_transport_rate(db, rate_id, payload, identity.email or DEFAULT_ACTOR)
    if obj is None:
        return render(_not_found(rate_id))
    return render(ActionSuccess(obj), TransportRateRead)


@router.delete("/{rate_id}")
def deactivate_transport_rate(
    rate_id: int,
    db: Session = Depends(get_db),
    identity: RequestIdentity = Depends(require_operator),
):
    if not crud.deactivate_transport_rate(db, rate_id, identity.email or DEFAULT_ACTOR):
        return render(_not_found(rate_id))
    return render(ActionSuccess({"id": rate_id, "is_active": False}))
