"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Field-level rules (email syntax, name length, password strength) are
enforced by the domain so that every failure comes back as per-field
messages in the ValidationErrorResponse shape.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Request model for account signup."""

    email: str = Field(description="Checked by the domain, reported under errors.email")
    name: str = ""
    password: str = Field(default="", description="Account password (6 characters to 72 bytes)")
    password_confirmation: str | None = None


class RegisterResponse(BaseModel):
    """Response model for a signup that issued an activation link."""

    message: str
    email: str
    outcome: str
    notification_sent: bool = Field(description="False if the activation email could not be sent")


class UpdateRequest(BaseModel):
    """Request model for editing an account. Omitted fields are left unchanged."""

    name: str | None = None
    email: str | None = None
    password: str | None = None
    password_confirmation: str | None = None


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class AccountSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class AccountListResponse(BaseModel):
    """One page of accounts."""

    items: list[AccountSummaryResponse]
    next_page_token: str | None = None


class AccountDetailResponse(BaseModel):
    """Public account fields. Credential digests are never part of this model."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    provider: str
    activated: bool
    admin: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    projects: list[ProjectResponse] = []


class MessageResponse(BaseModel):
    """Response model carrying a single status message."""

    message: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str


class ValidationErrorDetail(BaseModel):
    message: str
    errors: dict[str, list[str]]


class ValidationErrorResponse(BaseModel):
    """Field-level validation failure."""

    detail: ValidationErrorDetail
