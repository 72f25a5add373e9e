import enum
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Integer, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.core.database import Base


class RegistrantStatus(str, enum.Enum):
    PERSONAL = "personal"
    PARENTS = "parents"
    TEACHER = "teacher"


class RegistrationState(str, enum.Enum):
    PENDING = "pending"
    VERIFIED = "verified"


class Registration(Base):
    __tablename__ = "registrations"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    event_id: Mapped[int] = mapped_column(Integer, ForeignKey("events.id"), index=True, nullable=False)
    category_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("event_categories.id"), nullable=True)
    subcategory_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("event_subcategories.id"), nullable=True)
    # set when the registrant was admitted from the waitlist with a code
    invitation_code_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("invitation_codes.id"), nullable=True)

    registrant_status: Mapped[RegistrantStatus] = mapped_column(
        SAEnum(RegistrantStatus, values_callable=lambda e: [m.value for m in e], native_enum=False),
        nullable=False,
    )
    registrant_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    registrant_whatsapp: Mapped[str] = mapped_column(String(50), nullable=False)
    registrant_email: Mapped[str] = mapped_column(String(255), nullable=False)
    participant_name: Mapped[str] = mapped_column(String(255), nullable=False)
    participant_age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    song_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    song_duration: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    birth_certificate_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    song_pdf_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    video_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    bank_name: Mapped[str] = mapped_column(String(255), nullable=False)
    bank_account_number: Mapped[str] = mapped_column(String(100), nullable=False)
    bank_account_name: Mapped[str] = mapped_column(String(255), nullable=False)
    payment_receipt_url: Mapped[str] = mapped_column(String, nullable=False)

    status: Mapped[RegistrationState] = mapped_column(
        SAEnum(RegistrationState, values_callable=lambda e: [m.value for m in e], native_enum=False),
        default=RegistrationState.PENDING,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
