"""DecisionRecord ORM model: the append-only outcome notice of a finalized event."""
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from datepoll.database import Base


class DecisionTrigger(str, enum.Enum):
    deadline = "deadline"
    auto_decision = "auto_decision"


class LatchState(str, enum.Enum):
    """One-shot guard per trigger: ``armed`` may fire, ``fired`` may not."""

    armed = "armed"
    fired = "fired"


class DecisionRecord(Base):
    __tablename__ = "decision_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    trigger = Column(SAEnum(DecisionTrigger), nullable=False)
    title = Column(String(255), nullable=False)
    link = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
