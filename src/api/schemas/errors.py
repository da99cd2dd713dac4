"""Response bodies for errors and plain confirmation messages.

Clients only ever receive a human-readable ``message``; there is no
machine-readable error code in the public contract.
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every error response."""

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["RolName is required", "Role with ID 7 was not found"],
    )


class MessageResponse(BaseModel):
    """Body of a successful operation that returns no entity."""

    message: str = Field(
        ...,
        description="Confirmation message",
        examples=["Role with ID 7 deleted successfully"],
    )
