import enum
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Integer, Float, DateTime, ForeignKey, JSON, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.core.database import Base


class EventType(str, enum.Enum):
    FESTIVAL = "festival"
    COMPETITION = "competition"
    MASTERCLASS = "masterclass"
    GROUP_CLASS = "group class"


class EventStatus(str, enum.Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[EventType] = mapped_column(
        SAEnum(EventType, values_callable=lambda e: [m.value for m in e], native_enum=False),
        nullable=False,
    )
    # {"en": "...", "id": "..."}
    description: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    registration_deadline: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    venue_details: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    status: Mapped[EventStatus] = mapped_column(
        SAEnum(EventStatus, values_callable=lambda e: [m.value for m in e], native_enum=False),
        default=EventStatus.UPCOMING,
        nullable=False,
    )
    poster_image: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    terms_and_conditions: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    registration_fee: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    max_quota: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    categories: Mapped[list["EventCategory"]] = relationship(
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventCategory.order_index",
        lazy="selectin",
    )


class EventCategory(Base):
    __tablename__ = "event_categories"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    event_id: Mapped[int] = mapped_column(Integer, ForeignKey("events.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    event: Mapped["Event"] = relationship(back_populates="categories")
    subcategories: Mapped[list["EventSubcategory"]] = relationship(
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="EventSubcategory.order_index",
        lazy="selectin",
    )


class EventSubcategory(Base):
    """Age group or level inside a category, e.g. "Junior A (7-9 years)"."""
    __tablename__ = "event_subcategories"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    category_id: Mapped[int] = mapped_column(Integer, ForeignKey("event_categories.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    age_requirement: Mapped[str] = mapped_column(String(255), nullable=False)
    registration_fee: Mapped[float] = mapped_column(Float, nullable=False)
    final_registration_fee: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    # [{"country": "...", "fee": "..."}]
    foreign_registration_fee: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    repertoire: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    performance_duration: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    requirements: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    category: Mapped["EventCategory"] = relationship(back_populates="subcategories")


class EventJury(Base):
    __tablename__ = "event_jury"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    event_id: Mapped[int] = mapped_column(Integer, ForeignKey("events.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    # label -> value, e.g. {"Education": "Juilliard School"}
    credentials: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
