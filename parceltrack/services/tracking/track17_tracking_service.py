import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

import httpx

from parceltrack.core.exceptions import BaseApplicationException, ExceptionFactory, UpstreamException
from parceltrack.core.result import Result
from parceltrack.factories.carrier_registry import DEFAULT_CARRIERS
from parceltrack.models.tracking_event import TrackingEvent, parse_carrier_datetime
from parceltrack.models.tracking_info import TrackingInfo
from parceltrack.models.tracking_status import TrackingStatus
from parceltrack.schemas.track17_tracking_schema import Track17AcceptedSchema, Track17EventSchema
from parceltrack.services.interfaces.tracking_service_interface import ITrackingService
from parceltrack.services.shipments.track17_client import Track17Client
from parceltrack.services.shipments.track17_status_mapping import (
    TRACK17_CARRIER_NAMES,
    get_carrier_name_for_track17_code,
    get_track17_carrier_code,
    map_track17_code_to_status,
)

logger = logging.getLogger(__name__)

DEFAULT_COUNTRY = "France"


class Track17TrackingService(ITrackingService):
    """17TRACK aggregator: fallback for carriers without a direct integration"""

    name = "track17"

    def __init__(self, track17_client: Optional[Track17Client] = None):
        self.track17_client = track17_client or Track17Client()

    def is_configured(self) -> bool:
        return self.track17_client.is_configured()

    async def get_tracking(
        self,
        tracking_number: str,
        carrier: str,
        force_refresh: bool = False
    ) -> Result[TrackingInfo]:
        """
        Get normalized tracking info through 17TRACK

        Args:
            tracking_number: Tracking number
            carrier: Carrier code, mapped to the 17TRACK numeric code when known
            force_refresh: Ignored, 17TRACK always returns its latest snapshot

        Returns:
            Result with normalized TrackingInfo
        """
        if not self.is_configured():
            return Result.fail(ExceptionFactory.not_configured("17TRACK"))

        if not tracking_number or not tracking_number.strip():
            return Result.fail(ExceptionFactory.tracking_number_required())

        tracking_number = tracking_number.strip()
        carrier = (carrier or "").strip()

        try:
            response = await self.track17_client.get_track_info(
                tracking_number, get_track17_carrier_code(carrier)
            )
        except BaseApplicationException as e:
            logger.warning(f"17TRACK tracking failed for {tracking_number}: {e.error_code} - {e.message}")
            return Result.fail(e)
        except httpx.HTTPError as e:
            logger.error(f"17TRACK transport error for {tracking_number}: {e}")
            return Result.fail(UpstreamException(
                "Erreur lors de la récupération du suivi",
                {"service": self.name, "reason": str(e)}
            ))

        rejected = response.data.rejected or []
        if rejected:
            rejection = rejected[0]
            message = rejection.error.message if rejection.error and rejection.error.message else None
            logger.info(f"17TRACK rejected {tracking_number}: {message}")
            return Result.fail(ExceptionFactory.parcel_not_found(tracking_number, message))

        accepted = response.data.accepted or []
        tracking = accepted[0] if accepted else None
        if tracking is None or tracking.track is None or tracking.track.e != 0:
            return Result.fail(ExceptionFactory.parcel_not_found(tracking_number))

        return Result.ok(self._normalize_tracking_response(tracking, carrier))

    async def create_tracking(
        self,
        tracking_number: str,
        carrier: str,
        metadata: Optional[Dict[str, str]] = None
    ) -> Result[None]:
        # 17TRACK doesn't require pre-registration
        return Result.ok()

    async def delete_tracking(self, tracking_number: str, carrier: str) -> Result[None]:
        # 17TRACK deletion is not used: no-op
        return Result.ok()

    async def detect_carrier(self, tracking_number: str) -> Result[List[str]]:
        """
        Ask 17TRACK which carrier owns the number

        Any upstream problem degrades to the default French carriers.
        """
        if not self.is_configured():
            return Result.fail(ExceptionFactory.not_configured("17TRACK"))

        if not tracking_number or not tracking_number.strip():
            return Result.fail(ExceptionFactory.tracking_number_required())

        try:
            response = await self.track17_client.register(tracking_number.strip())
        except (BaseApplicationException, httpx.HTTPError) as e:
            logger.warning(f"17TRACK carrier detection failed for {tracking_number}: {e}")
            return Result.ok(list(DEFAULT_CARRIERS))

        accepted = response.data.accepted or []
        if accepted:
            carrier_name = get_carrier_name_for_track17_code(accepted[0].carrier)
            if carrier_name:
                return Result.ok([carrier_name])

        return Result.ok(list(DEFAULT_CARRIERS))

    def _normalize_tracking_response(self, tracking: Track17AcceptedSchema, carrier: str) -> TrackingInfo:
        """
        Normalize 17TRACK accepted entry to TrackingInfo

        History (z1) first, then the latest event (z0) unless an entry with the
        exact same timestamp is already there, then newest first.
        """
        track = tracking.track
        status = map_track17_code_to_status(track.w1)

        events: List[TrackingEvent] = []
        for checkpoint in track.z1:
            event = self._normalize_event(checkpoint, tracking.no, status)
            if event is not None:
                events.append(event)

        if track.z0 is not None:
            latest = self._normalize_event(track.z0, tracking.no, status)
            if latest is not None and not any(e.timestamp == latest.timestamp for e in events):
                events.append(latest)

        events.sort(key=lambda e: e.timestamp, reverse=True)

        estimated_delivery = None
        origin = None
        destination = None
        if track.z2 is not None:
            estimated_delivery = parse_carrier_datetime(track.z2.d) if track.z2.d else None
            origin = track.z2.a or None
            destination = track.z2.b or None

        carrier_key = carrier.lower()
        return TrackingInfo(
            tracking_number=tracking.no,
            carrier=carrier_key,
            carrier_name=TRACK17_CARRIER_NAMES.get(carrier_key, carrier.upper()),
            current_status=status,
            estimated_delivery=estimated_delivery,
            events=events,
            origin_address=origin,
            destination_address=destination,
            last_updated=datetime.now(timezone.utc),
        )

    def _normalize_event(
        self,
        checkpoint: Track17EventSchema,
        tracking_number: str,
        status: TrackingStatus
    ) -> Optional[TrackingEvent]:
        timestamp = parse_carrier_datetime(checkpoint.z)
        if timestamp is None:
            logger.warning(f"Skipping 17TRACK event with invalid date {checkpoint.z!r}")
            return None

        result = TrackingEvent.create(
            tracking_number=tracking_number,
            status=status,
            message=checkpoint.d or status.label,
            location=checkpoint.a or checkpoint.c or DEFAULT_COUNTRY,
            timestamp=timestamp,
            raw_data=checkpoint.model_dump(),
        )
        if result.is_failure:
            logger.warning(f"Skipping 17TRACK event: {result.error_message}")
            return None
        return result.value
