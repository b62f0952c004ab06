"""Auth Schemas — magic-link login requests and answers.

Invariants:
    - LoginStartResponse never reveals whether the identifier matched a user
    - LoginCompleteResponse carries only a success flag, never a failure reason
    - The identifier is matched exactly as sent; only a blank one is rejected
"""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class LoginStartRequest(BaseModel):
    """Email address or phone number of the account."""
    identifier: str = Field(min_length=1, max_length=255)

    @field_validator("identifier")
    @classmethod
    def reject_blank_identifier(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("identifier cannot be empty or whitespace")
        return v


class LoginStartResponse(BaseModel):
    request_id: UUID


class LoginCompleteRequest(BaseModel):
    request_id: UUID
    secret: str = Field(min_length=1, max_length=256)


class LoginCompleteResponse(BaseModel):
    success: bool
