"""Outcome publication: decision records and the per-event RSS feed."""
import logging
import re
from email.utils import format_datetime
from typing import Sequence
from xml.etree import ElementTree as ET

from datepoll.models.decision_record import DecisionRecord, DecisionTrigger
from datepoll.models.event import Event
from datepoll.services.store import VoteStore
from datepoll.timeutil import ensure_utc

logger = logging.getLogger(__name__)

FEED_DESCRIPTION = "Notifications are posted here once this event's date is decided."

# Anything outside the XML 1.0 Char production
_INVALID_XML_CHARS = re.compile("[^\u0009\u000A\u000D\u0020-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


def vote_link(frontend_url: str, event_id: str) -> str:
    return f"{frontend_url.rstrip('/')}/{event_id}/vote"


class FeedNotifier:
    """Publishes an outcome as an append-only DecisionRecord (a feed item)."""

    def __init__(self, store: VoteStore, frontend_url: str):
        self._store = store
        self._frontend_url = frontend_url

    def publish(self, event: Event, trigger: DecisionTrigger, message: str) -> DecisionRecord:
        record = DecisionRecord(
            event_id=event.id,
            trigger=trigger,
            title=event.title,
            link=vote_link(self._frontend_url, event.id),
            description=message,
        )
        self._store.create_decision_record(record)
        logger.info("Published %s decision for event %s", trigger.value, event.id)
        return record


def _xml_text(value: str) -> str:
    return _INVALID_XML_CHARS.sub("\ufffd", value)


def render_rss(event: Event, records: Sequence[DecisionRecord], frontend_url: str) -> str:
    """Render an RSS 2.0 document with one item per decision record."""
    rss = ET.Element("rss", version="2.0")
    channel = ET.SubElement(rss, "channel")
    ET.SubElement(channel, "title").text = _xml_text(event.title)
    ET.SubElement(channel, "link").text = vote_link(frontend_url, event.id)
    ET.SubElement(channel, "description").text = FEED_DESCRIPTION
    if event.created_at is not None:
        ET.SubElement(channel, "pubDate").text = format_datetime(ensure_utc(event.created_at))

    for record in records:
        item = ET.SubElement(channel, "item")
        ET.SubElement(item, "title").text = _xml_text(record.title)
        ET.SubElement(item, "link").text = record.link
        ET.SubElement(item, "description").text = _xml_text(record.description)
        ET.SubElement(item, "guid", isPermaLink="false").text = f"{record.event_id}-{record.id}"
        if record.created_at is not None:
            ET.SubElement(item, "pubDate").text = format_datetime(ensure_utc(record.created_at))

    return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(rss, encoding="unicode")
