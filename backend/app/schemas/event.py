from pydantic import BaseModel, Field
from typing import Optional, Dict, List
from datetime import datetime

from app.models.event import EventType, EventStatus


class EventCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    order_index: int = 0


class EventSubcategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    age_requirement: str = Field(..., min_length=1, description="e.g. '7-9 years'")
    registration_fee: float = Field(..., ge=0)
    final_registration_fee: Optional[float] = Field(None, ge=0)
    foreign_registration_fee: Optional[List[Dict[str, str]]] = Field(None, description="[{country, fee}]")
    repertoire: List[str] = []
    performance_duration: Optional[str] = None
    requirements: Optional[str] = None
    order_index: int = 0


class EventSubcategoryCreate(EventSubcategoryBase):
    pass


class EventSubcategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    age_requirement: Optional[str] = Field(None, min_length=1)
    registration_fee: Optional[float] = Field(None, ge=0)
    final_registration_fee: Optional[float] = Field(None, ge=0)
    foreign_registration_fee: Optional[List[Dict[str, str]]] = None
    repertoire: Optional[List[str]] = None
    performance_duration: Optional[str] = None
    requirements: Optional[str] = None
    order_index: Optional[int] = None


class EventSubcategory(EventSubcategoryBase):
    id: int
    category_id: int

    class Config:
        from_attributes = True


class EventCategory(BaseModel):
    id: int
    event_id: int
    name: str
    description: Optional[str] = None
    order_index: int
    subcategories: List[EventSubcategory] = []

    class Config:
        from_attributes = True


class EventBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    type: EventType
    description: Optional[Dict[str, str]] = Field(None, description="language code -> text")
    start_date: datetime
    end_date: Optional[datetime] = None
    registration_deadline: Optional[datetime] = None
    location: str
    venue_details: Optional[str] = None
    status: EventStatus = EventStatus.UPCOMING
    poster_image: Optional[str] = None
    terms_and_conditions: Optional[Dict[str, str]] = None
    registration_fee: Optional[float] = Field(None, ge=0)
    max_quota: Optional[int] = Field(None, ge=1)


class EventCreate(EventBase):
    pass


class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[EventType] = None
    description: Optional[Dict[str, str]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    registration_deadline: Optional[datetime] = None
    location: Optional[str] = None
    venue_details: Optional[str] = None
    status: Optional[EventStatus] = None
    poster_image: Optional[str] = None
    terms_and_conditions: Optional[Dict[str, str]] = None
    registration_fee: Optional[float] = Field(None, ge=0)
    max_quota: Optional[int] = Field(None, ge=1)


class Event(EventBase):
    id: int
    categories: List[EventCategory] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class EventDetail(Event):
    registration_count: int = 0


class EventPage(BaseModel):
    events: List[Event]
    total: int
    page: int
    limit: int


class EventJuryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    avatar_url: Optional[str] = None
    credentials: Optional[Dict[str, str]] = Field(None, description="label -> value")


class EventJuryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    avatar_url: Optional[str] = None
    credentials: Optional[Dict[str, str]] = None


class EventJury(EventJuryCreate):
    id: int
    event_id: int
    created_at: datetime

    class Config:
        from_attributes = True
