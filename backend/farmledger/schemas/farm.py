"""Farm schemas."""
from pydantic import Field

from farmledger.schemas.base import CamelModel


class FarmCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class FarmResponse(CamelModel):
    id: int
    name: str
    location: str
    description: str | None


class FarmMemberAdd(CamelModel):
    email: str  # str to allow dev/internal emails like owner@farmledger.local
