"""Vote store: the persistence operations the decision engine relies on.

``VoteStore`` is the contract; ``SqlAlchemyVoteStore`` implements it over a
single session. Write methods only flush, the caller decides when to commit,
so a latch claim and its DecisionRecord land in the same transaction.
"""
import logging
from typing import Protocol

from fastapi import Depends
from sqlalchemy import false, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from datepoll.database import get_db
from datepoll.errors import ConflictError, NotFoundError, StorageError
from datepoll.models.decision_record import DecisionRecord, DecisionTrigger
from datepoll.models.event import CandidateDate, Event
from datepoll.models.participant import Participant

logger = logging.getLogger(__name__)


class VoteStore(Protocol):
    def load_event(self, event_id: str) -> Event: ...

    def load_all_events(self) -> list[Event]: ...

    def create_event(self, event: Event) -> Event: ...

    def save_event(self, event: Event) -> Event: ...

    def create_participant_with_responses(self, participant: Participant) -> Participant: ...

    def create_decision_record(self, record: DecisionRecord) -> DecisionRecord: ...

    def list_decision_records(self, event_id: str) -> list[DecisionRecord]: ...

    def claim_latch(self, event_id: str, trigger: DecisionTrigger) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


_LATCH_COLUMNS = {
    DecisionTrigger.deadline: Event.deadline_reached,
    DecisionTrigger.auto_decision: Event.auto_decision_reached,
}


class SqlAlchemyVoteStore:
    """VoteStore backed by one SQLAlchemy session."""

    def __init__(self, db: Session):
        self._db = db

    def _events(self):
        return self._db.query(Event).options(
            selectinload(Event.candidate_dates).selectinload(CandidateDate.responses),
            selectinload(Event.participants).selectinload(Participant.responses),
        )

    def _fail(self, action: str, exc: SQLAlchemyError) -> StorageError:
        self._db.rollback()
        logger.error("Storage failure while trying to %s: %s", action, exc)
        return StorageError(f"Failed to {action}")

    # ── Reads ──────────────────────────────────────────────────────

    def load_event(self, event_id: str) -> Event:
        try:
            event = self._events().filter(Event.id == event_id).first()
        except SQLAlchemyError as exc:
            raise self._fail(f"load event {event_id}", exc) from exc
        if event is None:
            raise NotFoundError("Event not found")
        return event

    def load_all_events(self) -> list[Event]:
        try:
            return self._events().order_by(Event.created_at, Event.id).all()
        except SQLAlchemyError as exc:
            raise self._fail("load events", exc) from exc

    def list_decision_records(self, event_id: str) -> list[DecisionRecord]:
        try:
            return (
                self._db.query(DecisionRecord)
                .filter(DecisionRecord.event_id == event_id)
                .order_by(DecisionRecord.id)
                .all()
            )
        except SQLAlchemyError as exc:
            raise self._fail(f"list decision records for {event_id}", exc) from exc

    # ── Writes (flush only) ────────────────────────────────────────

    def create_event(self, event: Event) -> Event:
        self._db.add(event)
        try:
            self._db.flush()
        except SQLAlchemyError as exc:
            raise self._fail("create event", exc) from exc
        return event

    def save_event(self, event: Event) -> Event:
        try:
            self._db.flush()
        except SQLAlchemyError as exc:
            raise self._fail(f"update event {event.id}", exc) from exc
        return event

    def _participant_exists(self, event_id: str, participant_id: int) -> bool:
        return self._db.get(Participant, (event_id, participant_id)) is not None

    def create_participant_with_responses(self, participant: Participant) -> Participant:
        event_id, participant_id = participant.event_id, participant.id
        if self._participant_exists(event_id, participant_id):
            raise ConflictError(f"Participant {participant_id} already exists for this event")
        self._db.add(participant)
        try:
            self._db.flush()
        except IntegrityError as exc:
            # Only a concurrent insert of the same key is a conflict; other
            # constraint violations (foreign keys) are storage failures.
            self._db.rollback()
            if self._participant_exists(event_id, participant_id):
                raise ConflictError(f"Participant {participant_id} already exists for this event") from exc
            raise self._fail("register participant", exc) from exc
        except SQLAlchemyError as exc:
            raise self._fail("register participant", exc) from exc
        return participant

    def create_decision_record(self, record: DecisionRecord) -> DecisionRecord:
        self._db.add(record)
        try:
            self._db.flush()
        except SQLAlchemyError as exc:
            raise self._fail(f"create decision record for {record.event_id}", exc) from exc
        return record

    def claim_latch(self, event_id: str, trigger: DecisionTrigger) -> bool:
        """Flip the trigger's flag from false to true; True only for the winner."""
        column = _LATCH_COLUMNS[trigger]
        stmt = (
            update(Event)
            .where(Event.id == event_id, column == false())
            .values({column: True})
            .execution_options(synchronize_session=False)
        )
        try:
            result = self._db.execute(stmt)
        except SQLAlchemyError as exc:
            raise self._fail(f"claim {trigger.value} latch for {event_id}", exc) from exc
        return result.rowcount == 1

    # ── Transaction control ────────────────────────────────────────

    def commit(self) -> None:
        try:
            self._db.commit()
        except SQLAlchemyError as exc:
            raise self._fail("commit", exc) from exc

    def rollback(self) -> None:
        self._db.rollback()


def get_store(db: Session = Depends(get_db)) -> SqlAlchemyVoteStore:
    return SqlAlchemyVoteStore(db)
