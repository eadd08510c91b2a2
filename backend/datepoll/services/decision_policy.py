"""Decision policy: when a poll may be finalized and what the outcome says.

Two triggers finalize an event, each guarded by its own one-shot latch:

- ``deadline``: the deadline is enabled, set and in the past.
- ``auto_decision``: auto-decision is enabled and the participant count has
  reached the threshold.

A fired latch is only re-armed by a settings update that changes the
deadline (while it stays enabled) or the threshold (while auto-decision stays
enabled). Everything here is pure; persistence lives in the store.
"""
from datetime import datetime, tzinfo
from typing import Optional, Sequence

from datepoll.models.decision_record import DecisionTrigger, LatchState
from datepoll.models.event import CandidateDate, Event
from datepoll.timeutil import ensure_utc

DISPLAY_DATE_FORMAT = "%B %d, %Y"


def format_candidate_date(value: datetime, display_tz: tzinfo) -> str:
    return ensure_utc(value).astimezone(display_tz).strftime(DISPLAY_DATE_FORMAT)


# ── Guards ─────────────────────────────────────────────────────────

def deadline_due(event: Event, now: datetime) -> bool:
    """True when the deadline trigger should fire for ``event`` at ``now``."""
    deadline = ensure_utc(event.deadline)
    return (
        bool(event.deadline_enable)
        and deadline is not None
        and deadline < now
        and event.deadline_latch == LatchState.armed
    )


def auto_decision_due(event: Event, participant_count: int) -> bool:
    """True when the threshold trigger should fire.

    ``participant_count`` must already include the participant whose
    registration prompted the check.
    """
    return (
        bool(event.auto_decision_enable)
        and event.auto_decision_latch == LatchState.armed
        and participant_count >= event.auto_decision_threshold
    )


# ── Re-arming on settings change ───────────────────────────────────

def deadline_latch_after_update(
    current: LatchState,
    deadline_enable: bool,
    old_deadline: Optional[datetime],
    new_deadline: Optional[datetime],
) -> LatchState:
    if deadline_enable and ensure_utc(old_deadline) != ensure_utc(new_deadline):
        return LatchState.armed
    return current


def auto_decision_latch_after_update(
    current: LatchState,
    auto_decision_enable: bool,
    old_threshold: int,
    new_threshold: int,
) -> LatchState:
    if auto_decision_enable and old_threshold != new_threshold:
        return LatchState.armed
    return current


# ── Outcome message ────────────────────────────────────────────────

def _lead(trigger: DecisionTrigger, threshold: Optional[int]) -> str:
    if trigger == DecisionTrigger.deadline:
        return "The deadline has passed"
    return f"{threshold} or more participants have voted"


def build_outcome_message(
    trigger: DecisionTrigger,
    title: str,
    winners: Sequence[CandidateDate],
    display_tz: tzinfo,
    threshold: Optional[int] = None,
) -> str:
    """Render the outcome text; the template depends only on ``len(winners)``."""
    lead = _lead(trigger, threshold)
    if not winners:
        return f"[{title}] {lead}, but no candidate date received any votes."
    if len(winners) == 1:
        date = format_candidate_date(winners[0].date_time, display_tz)
        return f"[{title}] {lead}. The most voted candidate date is:\nDate: {date}"
    dates = ", ".join(format_candidate_date(w.date_time, display_tz) for w in winners)
    return f"[{title}] {lead}, but several candidate dates are tied for the most votes.\nDates: {dates}"
