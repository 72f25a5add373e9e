from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from app.models.registration import RegistrantStatus, RegistrationState


class RegistrationCreate(BaseModel):
    category_id: Optional[int] = None
    subcategory_id: Optional[int] = None
    registrant_status: RegistrantStatus
    registrant_name: Optional[str] = None
    registrant_whatsapp: str = Field(..., min_length=10, description="WhatsApp number incl. country code")
    registrant_email: EmailStr
    participant_name: str = Field(..., min_length=1)
    participant_age: Optional[int] = Field(None, ge=0, le=120)
    song_title: Optional[str] = None
    song_duration: Optional[str] = None
    birth_certificate_url: Optional[str] = None
    song_pdf_url: Optional[str] = None
    video_url: Optional[str] = None
    bank_name: str = Field(..., min_length=1)
    bank_account_number: str = Field(..., min_length=1)
    bank_account_name: str = Field(..., min_length=1)
    payment_receipt_url: str = Field(..., min_length=1)
    # only needed for waitlist registrations
    invitation_code: Optional[str] = None


class Registration(BaseModel):
    id: int
    event_id: int
    category_id: Optional[int] = None
    subcategory_id: Optional[int] = None
    invitation_code_id: Optional[int] = None
    registrant_status: RegistrantStatus
    registrant_name: Optional[str] = None
    registrant_whatsapp: str
    registrant_email: str
    participant_name: str
    participant_age: Optional[int] = None
    song_title: Optional[str] = None
    song_duration: Optional[str] = None
    birth_certificate_url: Optional[str] = None
    song_pdf_url: Optional[str] = None
    video_url: Optional[str] = None
    bank_name: str
    bank_account_number: str
    bank_account_name: str
    payment_receipt_url: str
    status: RegistrationState
    created_at: datetime

    class Config:
        from_attributes = True


class RegistrationStatusUpdate(BaseModel):
    status: RegistrationState
