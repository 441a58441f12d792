"""
Pydantic schemas for reservation request/response validation.
"""

from datetime import date, datetime, time
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from facility_reservations.domain.models import ReservationDraft


class ReservationCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    asset_id: int = Field(..., gt=0)
    date: date
    range: int = Field(default=1, ge=1, le=366)
    time_start: time
    time_end: time
    description: str = Field("", max_length=2000)
    category: str = Field("", max_length=100)
    info_type: str = Field("", max_length=100)
    people_tag: list[str] = Field(default_factory=list)
    reserved_by: Optional[str] = Field(None, max_length=255)

    @field_validator("people_tag", mode="before")
    @classmethod
    def split_people(cls, value):
        # The wizard sends tagged people as one comma-separated string
        if isinstance(value, str):
            return [name.strip() for name in value.split(",") if name.strip()]
        return value

    def to_draft(self) -> ReservationDraft:
        return ReservationDraft(
            asset_id=self.asset_id,
            title=self.title,
            date=self.date,
            range=self.range,
            time_start=self.time_start,
            time_end=self.time_end,
            description=self.description,
            category=self.category,
            info_type=self.info_type,
            people_tag=tuple(self.people_tag),
            reserved_by=self.reserved_by,
        )


class ReservationUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    category: Optional[str] = Field(None, max_length=100)
    info_type: Optional[str] = Field(None, max_length=100)
    people_tag: Optional[list[str]] = None
    expected_version: Optional[int] = None

    @field_validator("people_tag", mode="before")
    @classmethod
    def split_people(cls, value):
        if isinstance(value, str):
            return [name.strip() for name in value.split(",") if name.strip()]
        return value

    @field_validator("title", "description", "category", "info_type", "people_tag")
    @classmethod
    def not_null(cls, value):
        # Omit a field to leave it alone; the stored columns are NOT NULL
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude={"expected_version"})


class StatusChange(BaseModel):
    actor: str = Field(..., min_length=1, max_length=255)
    reason: Optional[str] = Field(None, max_length=1000)
    expected_version: Optional[int] = None


class ReservationResponse(BaseModel):
    id: int
    asset_id: int
    title: str
    description: str
    category: str
    info_type: str
    people_tag: list[str]
    reserved_by: Optional[str]
    date: date
    range: int
    time_start: time
    time_end: time
    status: str
    approved_by: Optional[str]
    declined_by: Optional[str]
    resolution_reason: Optional[str]
    auto_declined: bool
    finished_on: Optional[date]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    version: int

    model_config = {"from_attributes": True}


class SubmissionResponse(BaseModel):
    reservation: ReservationResponse
    conflicts: list[ReservationResponse]
    has_conflicts: bool


class ConflictCheckResponse(BaseModel):
    conflicts: list[ReservationResponse]
    has_conflicts: bool


class CascadeOutcomeResponse(BaseModel):
    reservation_id: int
    reserved_by: Optional[str]
    state: str
    error: Optional[str] = None


class NotificationTarget(BaseModel):
    reservation_id: int
    reserved_by: Optional[str]


class ApprovalResponse(BaseModel):
    reservation: ReservationResponse
    conflicts: list[ReservationResponse]
    cascaded_declines: list[ReservationResponse]
    cascade: list[CascadeOutcomeResponse]
    notify: list[NotificationTarget]
    complete: bool


class FinishResponse(BaseModel):
    finished: list[ReservationResponse]


class StatsResponse(BaseModel):
    total: int
    pending: int
    approved: int
    rejected: int
    finished: int
    by_asset: dict[int, int]

    model_config = {"from_attributes": True}
