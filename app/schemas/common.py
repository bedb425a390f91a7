"""Response envelopes shared by several endpoints."""

from pydantic import BaseModel


class SuccessResponse(BaseModel):
    """Bare success flag used by the simple write endpoints."""

    success: bool = True


class ErrorResponse(BaseModel):
    """Body of every error response."""

    success: bool = False
    error: str
