from __future__ import annotations

from pydantic import BaseModel, Field


class RequestIdentity(BaseModel):
    email: str | None = None
    auth_source: str = "anonymous"
    role_names: list[str] = Field(default_factory=list)
