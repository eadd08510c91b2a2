"""Tally engine: pick the candidate date(s) with the most ``available`` votes.

Pure functions over already-loaded candidate dates; nothing here touches the
database. Every response counts, including repeated responses for the same
participant and date.
"""
from typing import Sequence

from datepoll.models.event import CandidateDate
from datepoll.models.participant import ResponseStatus


def score(candidate_date: CandidateDate) -> int:
    """Number of ``available`` responses for one candidate date."""
    return sum(1 for r in candidate_date.responses if r.status == ResponseStatus.available)


def tally(candidate_dates: Sequence[CandidateDate]) -> list[tuple[CandidateDate, int]]:
    """Score every candidate date, keeping input order."""
    return [(cd, score(cd)) for cd in candidate_dates]


def most_voted_candidates(candidate_dates: Sequence[CandidateDate]) -> list[CandidateDate]:
    """Return every candidate date sharing the highest positive score.

    Dates with zero ``available`` votes never win, so an event nobody marked
    available yields an empty list. Ties are all returned, in input order.
    """
    max_score = 0
    winners: list[CandidateDate] = []
    for candidate_date, points in tally(candidate_dates):
        if points == 0:
            continue
        if points > max_score:
            max_score = points
            winners = [candidate_date]
        elif points == max_score:
            winners.append(candidate_date)
    return winners
