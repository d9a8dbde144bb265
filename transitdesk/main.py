import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from transitdesk.api.responses import request_validation_handler, service_failure_handler
from transitdesk.api.v1.endpoints.api import api_router
from transitdesk.core.errors import ServiceFailure

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title="TransitDesk API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # For development; restrict to the back-office domain in production
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ServiceFailure, service_failure_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)

app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
def health():
    return {"status": "up"}
