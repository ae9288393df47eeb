"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from pydantic import BaseModel, ConfigDict, Field


class PersonData(BaseModel):
    """Public view of a registered or in-progress account."""

    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    gender: str | None = None
    birth_date: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    about: str | None = None
    account_level: str | None = None


class RegistrationResponse(BaseModel):
    """Response model for registration form display and submission."""

    success: bool
    data: PersonData
    errors: dict[str, str] = Field(default_factory=dict)


class RecoveryRequest(BaseModel):
    """Request model for password recovery."""

    username: str | None = Field(default=None, description="Username or email address")


class RecoveryResponse(BaseModel):
    """Response model for password recovery."""

    success: bool
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
