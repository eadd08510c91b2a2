"""Event service: poll creation, registration and settings.

Responsibilities:
- Event + candidate dates created as one unit
- Participant + responses created as one unit, candidate dates checked
  against the event
- Settings changes gated by ``allow_setting_changes``; changing the deadline
  or the threshold re-arms the matching latch
"""
import logging

from datepoll.errors import ForbiddenError, NotFoundError
from datepoll.models.decision_record import DecisionRecord, LatchState
from datepoll.models.event import CandidateDate, Event
from datepoll.models.participant import Participant, Response, ResponseStatus
from datepoll.schemas.event import EventCreate, EventSettings
from datepoll.schemas.participant import ParticipantRegister
from datepoll.services.decision_policy import auto_decision_latch_after_update, deadline_latch_after_update
from datepoll.services.store import VoteStore
from datepoll.timeutil import ensure_utc

logger = logging.getLogger(__name__)


def create_event(store: VoteStore, payload: EventCreate) -> Event:
    """Create an event with its candidate dates and settings."""
    cfg = payload.settings
    event = Event(
        title=payload.title,
        description=payload.description,
        creator_name=payload.creator_name,
        allow_setting_changes=cfg.allow_setting_changes,
        deadline_enable=cfg.deadline_enable,
        deadline=ensure_utc(cfg.deadline) if cfg.deadline_enable else None,
        auto_decision_enable=cfg.auto_decision_enable,
        auto_decision_threshold=cfg.auto_decision_threshold,
        rss_enabled=cfg.rss_enabled,
        deadline_reached=False,
        auto_decision_reached=False,
        candidate_dates=[CandidateDate(date_time=ensure_utc(dt)) for dt in payload.candidate_dates],
    )
    store.create_event(event)
    store.commit()
    logger.info("Created event '%s' (%s) with %d candidate date(s)", payload.title, event.id, len(payload.candidate_dates))
    return event


def register_participant(store: VoteStore, event_id: str, payload: ParticipantRegister) -> Participant:
    """Register a participant together with all of their responses."""
    event = store.load_event(event_id)
    known_dates = {cd.id for cd in event.candidate_dates}

    responses = []
    for status, refs in (
        (ResponseStatus.available, payload.available_candidate_dates),
        (ResponseStatus.maybe, payload.maybe_candidate_dates),
        (ResponseStatus.unavailable, payload.unavailable_candidate_dates),
    ):
        for ref in refs:
            if ref.id not in known_dates:
                raise NotFoundError(f"Candidate date {ref.id} not found for this event")
            responses.append(Response(candidate_date_id=ref.id, status=status))

    participant = Participant(
        event_id=event_id,
        id=payload.participant_id,
        name=payload.name,
        responses=responses,
    )
    store.create_participant_with_responses(participant)
    store.commit()
    logger.info("Registered participant %s (%s) for event %s with %d response(s)",
                payload.participant_id, payload.name, event_id, len(responses))
    return participant


def update_settings(store: VoteStore, event_id: str, payload: EventSettings) -> Event:
    """Replace an event's settings, re-arming latches whose trigger changed."""
    event = store.load_event(event_id)
    if not event.allow_setting_changes:
        raise ForbiddenError("This event's settings cannot be changed")

    new_deadline = ensure_utc(payload.deadline) if payload.deadline_enable else None
    deadline_latch = deadline_latch_after_update(
        event.deadline_latch, payload.deadline_enable, event.deadline, new_deadline,
    )
    auto_latch = auto_decision_latch_after_update(
        event.auto_decision_latch, payload.auto_decision_enable,
        event.auto_decision_threshold, payload.auto_decision_threshold,
    )
    if deadline_latch != event.deadline_latch or auto_latch != event.auto_decision_latch:
        logger.info("Re-arming latches for event %s: deadline=%s auto_decision=%s",
                    event_id, deadline_latch.value, auto_latch.value)

    event.deadline_reached = deadline_latch == LatchState.fired
    event.auto_decision_reached = auto_latch == LatchState.fired
    event.allow_setting_changes = payload.allow_setting_changes
    event.deadline_enable = payload.deadline_enable
    event.deadline = new_deadline
    event.auto_decision_enable = payload.auto_decision_enable
    event.auto_decision_threshold = payload.auto_decision_threshold
    event.rss_enabled = payload.rss_enabled

    store.save_event(event)
    store.commit()
    logger.info("Updated settings of event %s", event_id)
    return event


def list_decisions(store: VoteStore, event_id: str) -> list[DecisionRecord]:
    store.load_event(event_id)
    return store.list_decision_records(event_id)
