from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from app.services.invitation_service import CODE_MIN_LENGTH, CODE_MAX_LENGTH, MAX_USES_LIMIT


class InvitationCodeCreate(BaseModel):
    code: str = Field(..., description="memorable phrase, e.g. 'music-lumina-2024'")
    max_uses: int = Field(1, ge=1, le=MAX_USES_LIMIT)
    expires_at: Optional[datetime] = Field(None, description="leave empty for a code that never expires")

    @field_validator("code")
    @classmethod
    def check_code_length(cls, value: str) -> str:
        if len(value) < CODE_MIN_LENGTH:
            raise ValueError(f"Code must be at least {CODE_MIN_LENGTH} characters")
        if len(value) > CODE_MAX_LENGTH:
            raise ValueError(f"Code must be less than {CODE_MAX_LENGTH} characters")
        return value


class InvitationCode(BaseModel):
    """Admin view of a code. The hash is never sent back."""
    id: int
    event_id: int
    max_uses: int
    current_uses: int
    expires_at: Optional[datetime] = None
    active: bool
    is_usable: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InvitationCodeVerify(BaseModel):
    code: str = Field(..., min_length=1, description="invitation code entered by the registrant")


class InvitationCodeVerifyResult(BaseModel):
    valid: bool
