"""Event API routes. Delegates to event_service and the finalize service."""
import logging
from fastapi import APIRouter, Depends, status

from datepoll.schemas.event import (
    DecisionRecordOut, EventCreate, EventCreated, EventOut, EventSettings, ParticipantOut,
)
from datepoll.schemas.participant import ParticipantRegister
from datepoll.services import event_service
from datepoll.services.finalize_service import FinalizeService, get_finalize_service
from datepoll.services.store import SqlAlchemyVoteStore, get_store

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventCreated, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, store: SqlAlchemyVoteStore = Depends(get_store)):
    """Create a poll with its candidate dates and settings."""
    event = event_service.create_event(store, payload)
    return {"id": event.id}


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, store: SqlAlchemyVoteStore = Depends(get_store)):
    """Fetch an event with candidate dates, participants and their responses."""
    return store.load_event(event_id)


@router.post("/{event_id}/participants", response_model=ParticipantOut, status_code=status.HTTP_201_CREATED)
def register_participant(
    event_id: str,
    payload: ParticipantRegister,
    store: SqlAlchemyVoteStore = Depends(get_store),
    finalizer: FinalizeService = Depends(get_finalize_service),
):
    """Register a participant's votes, then run the auto-decision check inline.

    The registration is committed before the check, so it stays in place even
    if finalizing fails.
    """
    participant = event_service.register_participant(store, event_id, payload)
    record = finalizer.check_auto_decision(event_id)
    if record is not None:
        logger.info("Registration of participant %s decided event %s", participant.id, event_id)
    return participant


@router.put("/{event_id}/settings")
def update_settings(event_id: str, payload: EventSettings, store: SqlAlchemyVoteStore = Depends(get_store)):
    """Replace an event's settings (only while allow_setting_changes is on)."""
    event_service.update_settings(store, event_id, payload)
    return {"message": "Settings updated"}


@router.get("/{event_id}/decisions", response_model=list[DecisionRecordOut])
def list_decisions(event_id: str, store: SqlAlchemyVoteStore = Depends(get_store)):
    """List the event's decision records, oldest first."""
    return event_service.list_decisions(store, event_id)
