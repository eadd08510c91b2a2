"""Event and CandidateDate ORM models."""
import uuid
from sqlalchemy import Column, String, Text, Boolean, DateTime, Integer, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from datepoll.database import Base
from datepoll.models.decision_record import LatchState


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    creator_name = Column(String(100), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Latch flags, one per trigger
    deadline_reached = Column(Boolean, nullable=False, default=False)
    auto_decision_reached = Column(Boolean, nullable=False, default=False)

    # Settings
    allow_setting_changes = Column(Boolean, nullable=False, default=True)
    deadline_enable = Column(Boolean, nullable=False, default=False)
    deadline = Column(DateTime(timezone=True), nullable=True)  # stored as UTC
    auto_decision_enable = Column(Boolean, nullable=False, default=False)
    auto_decision_threshold = Column(Integer, nullable=False, default=0)
    rss_enabled = Column(Boolean, nullable=False, default=False)

    candidate_dates = relationship(
        "CandidateDate", back_populates="event", cascade="all, delete-orphan", order_by="CandidateDate.id",
    )
    participants = relationship(
        "Participant", back_populates="event", cascade="all, delete", order_by="Participant.id",
    )
    decision_records = relationship(
        "DecisionRecord", cascade="all, delete", order_by="DecisionRecord.id",
    )

    @property
    def deadline_latch(self) -> LatchState:
        return LatchState.fired if self.deadline_reached else LatchState.armed

    @property
    def auto_decision_latch(self) -> LatchState:
        return LatchState.fired if self.auto_decision_reached else LatchState.armed


class CandidateDate(Base):
    __tablename__ = "candidate_dates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    date_time = Column(DateTime(timezone=True), nullable=False)  # stored as UTC
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event", back_populates="candidate_dates")
    responses = relationship(
        "Response", cascade="all, delete", order_by="Response.id",
    )
