"""Participant and Response ORM models."""
import enum
from sqlalchemy import (
    Column, String, Integer, DateTime, ForeignKey, ForeignKeyConstraint, Enum as SAEnum,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from datepoll.database import Base


class ResponseStatus(str, enum.Enum):
    available = "available"
    maybe = "maybe"
    unavailable = "unavailable"


class Participant(Base):
    __tablename__ = "participants"

    # Caller-supplied id, unique within its event only
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), primary_key=True)
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event", back_populates="participants")
    responses = relationship("Response", cascade="all, delete-orphan", order_by="Response.id")


class Response(Base):
    __tablename__ = "responses"
    __table_args__ = (
        ForeignKeyConstraint(
            ["event_id", "participant_id"],
            ["participants.event_id", "participants.id"],
            ondelete="CASCADE",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(String(36), nullable=False, index=True)
    participant_id = Column(Integer, nullable=False)
    candidate_date_id = Column(
        Integer, ForeignKey("candidate_dates.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    status = Column(SAEnum(ResponseStatus), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
