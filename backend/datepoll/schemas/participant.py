"""Pydantic schemas for participant registration."""
from __future__ import annotations
from pydantic import BaseModel, Field


class CandidateDateRef(BaseModel):
    id: int


class ParticipantRegister(BaseModel):
    participant_id: int = Field(ge=0)
    name: str = Field(min_length=1, max_length=100)
    available_candidate_dates: list[CandidateDateRef] = []
    maybe_candidate_dates: list[CandidateDateRef] = []
    unavailable_candidate_dates: list[CandidateDateRef] = []
