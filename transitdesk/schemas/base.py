import re

from pydantic import BaseModel, ConfigDict

_ISO2 = re.compile(r"^[A-Z]{2}$")


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


def normalize_country_code(value: str) -> str:
    normalized = (value or "").strip().upper()
    if not _ISO2.match(normalized):
        raise ValueError("Country code must be an ISO 3166-1 alpha-2 code (e.g. FR, DE).")
    return normalized
