"""Clinic location schemas."""

from pydantic import BaseModel


class ClinicLocationResponse(BaseModel):
    """Schema for a clinic location."""

    id: int
    name: str

    model_config = {"from_attributes": True}


class ClinicLocationListResponse(BaseModel):
    """All clinic locations."""

    success: bool = True
    data: list[ClinicLocationResponse]
