from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from parceltrack.models.tracking_event import TrackingEvent
from parceltrack.models.tracking_status import TrackingStatus


def sort_events_newest_first(events: Sequence[TrackingEvent]) -> List[TrackingEvent]:
    """Return the events ordered by timestamp, most recent first."""
    return sorted(events, key=lambda e: e.timestamp, reverse=True)


def derive_current_status(
    events: Sequence[TrackingEvent],
    reported: Optional[TrackingStatus] = None
) -> TrackingStatus:
    """Carrier-reported status wins, then the newest event, then PENDING."""
    if reported is not None:
        return reported
    if events:
        return max(events, key=lambda e: e.timestamp).status
    return TrackingStatus.PENDING


@dataclass
class TrackingInfo:
    """Normalized answer of a tracking lookup"""

    tracking_number: str
    carrier: str
    carrier_name: str
    current_status: TrackingStatus
    estimated_delivery: Optional[datetime] = None
    events: List[TrackingEvent] = field(default_factory=list)
    origin_address: Optional[str] = None
    destination_address: Optional[str] = None
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        self.events = sort_events_newest_first(self.events)

    @property
    def latest_event(self) -> Optional[TrackingEvent]:
        return self.events[0] if self.events else None
