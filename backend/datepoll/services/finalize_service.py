"""Finalize service: runs the decision pipeline for both triggers.

tally → outcome message → decision record + latch flag, committed together.

- ``finalize_due_deadlines`` sweeps every event (called by the deadline sweeper).
- ``check_auto_decision`` checks one event right after a registration commits.

The latch claim is a conditional update in the store, so two concurrent
evaluations of the same event can never both publish.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Callable, Optional

import pytz
from fastapi import Depends

from datepoll.config import settings
from datepoll.models.decision_record import DecisionRecord, DecisionTrigger
from datepoll.models.event import Event
from datepoll.services.decision_policy import auto_decision_due, build_outcome_message, deadline_due
from datepoll.services.notifier import FeedNotifier
from datepoll.services.store import SqlAlchemyVoteStore, VoteStore, get_store
from datepoll.services.tally import most_voted_candidates
from datepoll.timeutil import now_in

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    finalized: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class FinalizeService:
    def __init__(
        self,
        store: VoteStore,
        notifier: FeedNotifier,
        clock: Callable[[], datetime],
        display_timezone: tzinfo,
    ):
        self._store = store
        self._notifier = notifier
        self._clock = clock
        self._display_tz = display_timezone

    def finalize_due_deadlines(self) -> SweepResult:
        """Finalize every event whose deadline has passed and whose latch is armed.

        A failing event is rolled back and reported in ``SweepResult.failed``;
        the sweep carries on with the remaining events.
        """
        now = self._clock()
        result = SweepResult()
        events = self._store.load_all_events()
        due = [(event.id, event) for event in events if deadline_due(event, now)]
        logger.info("Deadline sweep at %s: %d of %d event(s) due", now.isoformat(), len(due), len(events))

        for event_id, event in due:
            try:
                record = self._fire(event, DecisionTrigger.deadline)
            except Exception:
                self._store.rollback()
                logger.exception("Failed to finalize deadline for event %s", event_id)
                result.failed.append(event_id)
                continue
            if record is not None:
                result.finalized.append(event_id)

        if result.failed:
            logger.error("Deadline sweep finished with %d failure(s): %s", len(result.failed), result.failed)
        else:
            logger.info("Deadline sweep finished: %d event(s) finalized", len(result.finalized))
        return result

    def check_auto_decision(self, event_id: str) -> Optional[DecisionRecord]:
        """Finalize ``event_id`` if its participant count reached the threshold.

        Raises NotFoundError for an unknown event and StorageError if the
        decision could not be persisted.
        """
        event = self._store.load_event(event_id)
        participant_count = len(event.participants)
        logger.debug(
            "Auto-decision check for %s: enabled=%s participants=%d threshold=%d latch=%s",
            event_id, event.auto_decision_enable, participant_count,
            event.auto_decision_threshold, event.auto_decision_latch.value,
        )
        if not auto_decision_due(event, participant_count):
            return None
        return self._fire(event, DecisionTrigger.auto_decision)

    def _fire(self, event: Event, trigger: DecisionTrigger) -> Optional[DecisionRecord]:
        event_id = event.id
        if not self._store.claim_latch(event_id, trigger):
            self._store.rollback()
            logger.info("%s latch for event %s already fired, skipping", trigger.value, event_id)
            return None

        winners = most_voted_candidates(event.candidate_dates)
        message = build_outcome_message(
            trigger, event.title, winners, self._display_tz, threshold=event.auto_decision_threshold,
        )
        record = self._notifier.publish(event, trigger, message)
        self._store.commit()
        logger.info("Event %s finalized by %s with %d winning date(s)", event_id, trigger.value, len(winners))
        return record


def build_finalize_service(store: VoteStore) -> FinalizeService:
    return FinalizeService(
        store=store,
        notifier=FeedNotifier(store, settings.FRONTEND_URL),
        clock=lambda: now_in(settings.SCHEDULER_TIMEZONE),
        display_timezone=pytz.timezone(settings.SCHEDULER_TIMEZONE),
    )


def get_finalize_service(store: SqlAlchemyVoteStore = Depends(get_store)) -> FinalizeService:
    return build_finalize_service(store)
