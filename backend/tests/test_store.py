"""Tests for SqlAlchemyVoteStore participant registration errors."""
from datetime import datetime, timezone

import pytest

from datepoll.errors import ConflictError, StorageError
from datepoll.models.event import CandidateDate, Event
from datepoll.models.participant import Participant, Response, ResponseStatus
from datepoll.services.store import SqlAlchemyVoteStore


def _seed_event(db) -> Event:
    event = Event(
        title="Team Dinner",
        candidate_dates=[CandidateDate(date_time=datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc))],
    )
    db.add(event)
    db.commit()
    return event


class TestCreateParticipant:
    def test_existing_participant_conflicts(self, db):
        event = _seed_event(db)
        store = SqlAlchemyVoteStore(db)
        store.create_participant_with_responses(Participant(event_id=event.id, id=1, name="Alice"))
        store.commit()

        with pytest.raises(ConflictError):
            store.create_participant_with_responses(Participant(event_id=event.id, id=1, name="Bob"))

    def test_insert_racing_same_key_conflicts(self, db, session_factory):
        event = _seed_event(db)
        event_id = event.id
        other = session_factory()
        store = SqlAlchemyVoteStore(other)
        real_check = store._participant_exists
        checks = []

        def stale_first_check(e_id, p_id):
            checks.append(p_id)
            return False if len(checks) == 1 else real_check(e_id, p_id)

        store._participant_exists = stale_first_check
        db.add(Participant(event_id=event_id, id=1, name="Alice"))
        db.commit()

        try:
            with pytest.raises(ConflictError):
                store.create_participant_with_responses(Participant(event_id=event_id, id=1, name="Bob"))
        finally:
            other.close()
        assert len(checks) == 2

    def test_unknown_event_is_a_storage_failure(self, db):
        store = SqlAlchemyVoteStore(db)
        with pytest.raises(StorageError):
            store.create_participant_with_responses(Participant(event_id="missing", id=1, name="Alice"))
        assert db.query(Participant).count() == 0

    def test_unknown_candidate_date_is_a_storage_failure(self, db):
        event = _seed_event(db)
        event_id = event.id
        store = SqlAlchemyVoteStore(db)
        participant = Participant(
            event_id=event_id,
            id=1,
            name="Alice",
            responses=[Response(candidate_date_id=9999, status=ResponseStatus.available)],
        )

        with pytest.raises(StorageError):
            store.create_participant_with_responses(participant)
        assert db.query(Participant).count() == 0
        assert db.query(Response).count() == 0
