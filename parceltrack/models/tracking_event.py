"""Tracking checkpoint shared by every tracking backend."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Union

from parceltrack.core.exceptions import ErrorCode, ExceptionFactory, ValidationException
from parceltrack.core.result import Result
from parceltrack.models.tracking_status import CarrierVocabulary, TrackingStatus

logger = logging.getLogger(__name__)

UNKNOWN_LOCATION_LABEL = "Localisation inconnue"
DISPLAY_TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M"


def parse_carrier_datetime(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 date coming from a carrier payload.

    Naive values are assumed UTC, ``Z`` suffixes are accepted.
    Returns None when the value cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True, slots=True)
class TrackingEvent:
    """One checkpoint in the shipment's journey. Never mutated after creation."""

    tracking_number: str
    status: TrackingStatus
    message: str
    location: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    raw_data: Optional[Dict[str, Any]] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def formatted_location(self) -> str:
        return self.location or UNKNOWN_LOCATION_LABEL

    @property
    def formatted_timestamp(self) -> str:
        return self.timestamp.strftime(DISPLAY_TIMESTAMP_FORMAT)

    @classmethod
    def create(
        cls,
        tracking_number: str,
        status: Union[TrackingStatus, str],
        message: str,
        location: Optional[str] = None,
        timestamp: Optional[datetime] = None,
        raw_data: Optional[Dict[str, Any]] = None,
    ) -> Result["TrackingEvent"]:
        """
        Create a new TrackingEvent

        Args:
            tracking_number: Carrier tracking number (trimmed, required)
            status: TrackingStatus or one of its names
            message: Checkpoint description (trimmed, required)
            location: Optional location, blank becomes None
            timestamp: Checkpoint time, defaults to now; naive values are taken as UTC
            raw_data: Upstream payload kept for audit

        Returns:
            Result with the event, or a validation failure
        """
        if not isinstance(tracking_number, str) or not tracking_number.strip():
            return Result.fail(ExceptionFactory.tracking_number_required())

        if not isinstance(message, str) or not message.strip():
            return Result.fail(ExceptionFactory.message_required())

        if isinstance(status, TrackingStatus):
            resolved_status = status
        else:
            status_result = TrackingStatus.from_string(status)
            if status_result.is_failure:
                return Result.fail(status_result.error)
            resolved_status = status_result.value

        cleaned_location = location.strip() if isinstance(location, str) else None

        return Result.ok(cls(
            tracking_number=tracking_number.strip(),
            status=resolved_status,
            message=message.strip(),
            location=cleaned_location or None,
            timestamp=parse_carrier_datetime(timestamp) or datetime.now(timezone.utc),
            raw_data=raw_data,
        ))

    @classmethod
    def reconstitute(
        cls,
        id: str,
        tracking_number: str,
        status: str,
        message: str,
        location: Optional[str],
        timestamp: Union[datetime, str],
        raw_data: Optional[Dict[str, Any]] = None,
    ) -> Result["TrackingEvent"]:
        """Rebuild an event from stored primitives, keeping its id. Naive timestamps are taken as UTC."""

        status_result = TrackingStatus.from_string(status)
        if status_result.is_failure:
            return Result.fail(status_result.error)

        parsed_timestamp = parse_carrier_datetime(timestamp)
        if parsed_timestamp is None:
            return Result.fail(ValidationException(
                f"Horodatage invalide: {timestamp!r}",
                ErrorCode.VALIDATION_ERROR,
                {"timestamp": str(timestamp)}
            ))

        return Result.ok(cls(
            tracking_number=tracking_number,
            status=status_result.value,
            message=message,
            location=location,
            timestamp=parsed_timestamp,
            raw_data=raw_data,
            id=id,
        ))

    @classmethod
    def from_carrier_checkpoint(
        cls,
        tracking_number: str,
        checkpoint: Mapping[str, Any],
        vocabulary: CarrierVocabulary = CarrierVocabulary.AFTERSHIP,
    ) -> Result["TrackingEvent"]:
        """
        Build an event from a raw carrier checkpoint record.

        Expected keys: ``tag``, ``checkpoint_time`` and optionally ``message``,
        ``location``, ``city``, ``country_name``, ``raw_status``.
        Fails only when the tag is outside the vocabulary.
        """
        if not isinstance(tracking_number, str) or not tracking_number.strip():
            return Result.fail(ExceptionFactory.tracking_number_required())

        status_result = TrackingStatus.from_carrier_tag(checkpoint.get("tag"), vocabulary)
        if status_result.is_failure:
            return Result.fail(status_result.error)
        status = status_result.value

        # Location: explicit field, then "city, country", then whatever is there
        location: Optional[str] = None
        if checkpoint.get("location"):
            location = str(checkpoint["location"]).strip() or None
        else:
            parts = [p for p in (checkpoint.get("city"), checkpoint.get("country_name")) if p]
            if parts:
                location = ", ".join(str(p).strip() for p in parts)

        message = checkpoint.get("message") or checkpoint.get("raw_status") or status.label

        timestamp = parse_carrier_datetime(checkpoint.get("checkpoint_time"))
        if timestamp is None:
            logger.warning(
                f"Unparsable checkpoint_time {checkpoint.get('checkpoint_time')!r} for {tracking_number}, using now"
            )
            timestamp = datetime.now(timezone.utc)

        return Result.ok(cls(
            tracking_number=tracking_number.strip(),
            status=status,
            message=str(message).strip() or status.label,
            location=location,
            timestamp=timestamp,
            raw_data=dict(checkpoint),
        ))
