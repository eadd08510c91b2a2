"""RSS feed route."""
from fastapi import APIRouter, Depends, HTTPException, Response

from datepoll.config import settings
from datepoll.services.notifier import render_rss
from datepoll.services.store import SqlAlchemyVoteStore, get_store

router = APIRouter()


@router.get("/{event_id}/feed")
def event_feed(event_id: str, store: SqlAlchemyVoteStore = Depends(get_store)):
    """Serve the event's decision records as an RSS 2.0 feed."""
    event = store.load_event(event_id)
    if not event.rss_enabled:
        raise HTTPException(status_code=404, detail="RSS feed is not enabled for this event")
    records = store.list_decision_records(event_id)
    return Response(content=render_rss(event, records, settings.FRONTEND_URL), media_type="application/rss+xml")
