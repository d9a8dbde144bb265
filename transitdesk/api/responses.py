from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from transitdesk.core.errors import VALIDATION_ERROR, ServiceFailure
from transitdesk.core.results import ActionFailure, ActionResult


def failure_response(failure: ActionFailure) -> JSONResponse:
    return JSONResponse(status_code=failure.status_code, content=failure.to_envelope())


def render(result: ActionResult, schema: Any = None, status_code: int = 200) -> JSONResponse:
    """
    Render an ActionResult as the {"success": ..., ...} envelope.

    `schema` (a pydantic model class) is applied to the success payload, or to
    every element when the payload is a list.
    """
    if not result.success:
        return failure_response(result)

    data = result.data
    if schema is not None:
        if isinstance(data, list):
            data = [schema.model_validate(item).model_dump(mode="json") for item in data]
        else:
            data = schema.model_validate(data).model_dump(mode="json")
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": jsonable_encoder(data)},
    )


def service_failure_handler(_request: Request, exc: ServiceFailure) -> JSONResponse:
    return failure_response(exc.to_result())


def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    # loc is ("body", "field", ...); drop the location prefix
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    failure = ActionFailure(
        error=first.get("msg", "Invalid request."),
        code=VALIDATION_ERROR,
        field=".".join(loc) or None,
        status_code=422,
    )
    return failure_response(failure)
