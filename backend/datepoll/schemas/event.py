"""Pydantic schemas for Events, candidate dates and decision records."""
from __future__ import annotations
from datetime import datetime
from typing import Annotated, Optional
from pydantic import AfterValidator, AwareDatetime, BaseModel, Field

from datepoll.timeutil import ensure_utc

# Outgoing timestamps always carry an offset (RFC 3339), even when read back naive.
Timestamp = Annotated[datetime, AfterValidator(ensure_utc)]


class EventSettings(BaseModel):
    allow_setting_changes: bool = True
    deadline_enable: bool = False
    deadline: Optional[AwareDatetime] = None  # ignored unless deadline_enable
    auto_decision_enable: bool = False
    auto_decision_threshold: int = Field(0, ge=0)
    rss_enabled: bool = False


class EventCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    creator_name: str = Field("", max_length=100)
    candidate_dates: list[AwareDatetime] = Field(min_length=1)
    settings: EventSettings = Field(default_factory=EventSettings)


class EventCreated(BaseModel):
    id: str


class ResponseOut(BaseModel):
    id: int
    participant_id: int
    candidate_date_id: int
    status: str

    model_config = {"from_attributes": True}


class CandidateDateOut(BaseModel):
    id: int
    event_id: str
    date_time: Timestamp
    responses: list[ResponseOut] = []

    model_config = {"from_attributes": True}


class ParticipantOut(BaseModel):
    id: int
    event_id: str
    name: str
    responses: list[ResponseOut] = []

    model_config = {"from_attributes": True}


class EventOut(BaseModel):
    id: str
    title: str
    description: str
    creator_name: str
    created_at: Optional[Timestamp] = None
    updated_at: Optional[Timestamp] = None
    deadline_reached: bool
    auto_decision_reached: bool
    allow_setting_changes: bool
    deadline_enable: bool
    deadline: Optional[Timestamp] = None
    auto_decision_enable: bool
    auto_decision_threshold: int
    rss_enabled: bool
    candidate_dates: list[CandidateDateOut] = []
    participants: list[ParticipantOut] = []

    model_config = {"from_attributes": True}


class DecisionRecordOut(BaseModel):
    id: int
    event_id: str
    trigger: str
    title: str
    link: str
    description: str
    created_at: Optional[Timestamp] = None

    model_config = {"from_attributes": True}
