import re
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

import httpx

from parceltrack.core.exceptions import BaseApplicationException, ExceptionFactory, UpstreamException
from parceltrack.core.result import Result
from parceltrack.models.tracking_event import TrackingEvent, parse_carrier_datetime
from parceltrack.models.tracking_info import TrackingInfo, derive_current_status
from parceltrack.schemas.colissimo_tracking_schema import ColissimoParcelSchema, ColissimoTimelineEventSchema
from parceltrack.services.interfaces.tracking_service_interface import ITrackingService
from parceltrack.services.shipments.colissimo_client import ColissimoClient
from parceltrack.services.shipments.colissimo_status_mapping import map_colissimo_code_to_status

logger = logging.getLogger(__name__)

COLISSIMO_PATTERNS = (
    re.compile(r"^[A-Z]{2}\d{9}FR$", re.IGNORECASE),  # International format
    re.compile(r"^\d{11,15}$"),                       # Domestic format
    re.compile(r"^[A-Z0-9]{13}$", re.IGNORECASE),     # Alternative format
)

DEFAULT_COUNTRY = "France"


class ColissimoTrackingService(ITrackingService):
    """Colissimo tracking through the official Timeline web service"""

    name = "colissimo"

    def __init__(self, colissimo_client: Optional[ColissimoClient] = None):
        self.colissimo_client = colissimo_client or ColissimoClient()

    def is_configured(self) -> bool:
        return self.colissimo_client.is_configured()

    async def get_tracking(
        self,
        tracking_number: str,
        carrier: str,
        force_refresh: bool = False
    ) -> Result[TrackingInfo]:
        """
        Get normalized tracking info for a Colissimo parcel

        Args:
            tracking_number: Colissimo parcel number
            carrier: Ignored, Colissimo only serves its own parcels
            force_refresh: Ignored, the timeline API is always live

        Returns:
            Result with normalized TrackingInfo
        """
        if not self.is_configured():
            return Result.fail(ExceptionFactory.not_configured("Colissimo"))

        if not tracking_number or not tracking_number.strip():
            return Result.fail(ExceptionFactory.tracking_number_required())

        tracking_number = tracking_number.strip()

        try:
            response = await self.colissimo_client.get_timeline(tracking_number)
            return Result.ok(self._normalize_tracking_response(response.parcel, tracking_number))
        except BaseApplicationException as e:
            logger.warning(f"Colissimo tracking failed for {tracking_number}: {e.error_code} - {e.message}")
            return Result.fail(e)
        except httpx.HTTPError as e:
            logger.error(f"Colissimo transport error for {tracking_number}: {e}")
            return Result.fail(UpstreamException(
                "Erreur lors de la récupération du suivi",
                {"service": self.name, "reason": str(e)}
            ))

    async def create_tracking(
        self,
        tracking_number: str,
        carrier: str,
        metadata: Optional[Dict[str, str]] = None
    ) -> Result[None]:
        # Colissimo doesn't require pre-registration for tracking
        return Result.ok()

    async def delete_tracking(self, tracking_number: str, carrier: str) -> Result[None]:
        # Colissimo doesn't support deleting trackings: no-op
        return Result.ok()

    async def detect_carrier(self, tracking_number: str) -> Result[List[str]]:
        if not tracking_number or not tracking_number.strip():
            return Result.fail(ExceptionFactory.tracking_number_required())

        cleaned = tracking_number.strip()
        if any(pattern.match(cleaned) for pattern in COLISSIMO_PATTERNS):
            return Result.ok(["colissimo", "laposte"])
        return Result.ok([])

    def _normalize_tracking_response(self, parcel: ColissimoParcelSchema, tracking_number: str) -> TrackingInfo:
        """
        Normalize Colissimo parcel to TrackingInfo

        Args:
            parcel: Validated Colissimo parcel
            tracking_number: Original tracking number used in request

        Returns:
            TrackingInfo with events sorted newest first
        """
        events: List[TrackingEvent] = []
        for checkpoint in parcel.timeline:
            event = self._normalize_event(checkpoint, tracking_number)
            if event is not None:
                events.append(event)

        reported_status = map_colissimo_code_to_status(parcel.status.code) if parcel.status else None

        estimated_delivery = parse_carrier_datetime(parcel.delivery_date) if parcel.delivery_date else None

        return TrackingInfo(
            tracking_number=tracking_number,
            carrier="colissimo",
            carrier_name="Colissimo",
            current_status=derive_current_status(events, reported_status),
            estimated_delivery=estimated_delivery,
            events=events,
            origin_address=DEFAULT_COUNTRY,
            destination_address=DEFAULT_COUNTRY,
            last_updated=datetime.now(timezone.utc),
        )

    def _normalize_event(
        self,
        checkpoint: ColissimoTimelineEventSchema,
        tracking_number: str
    ) -> Optional[TrackingEvent]:
        timestamp = parse_carrier_datetime(checkpoint.date)
        if timestamp is None:
            logger.warning(f"Skipping Colissimo event {checkpoint.code} with invalid date {checkpoint.date!r}")
            return None

        result = TrackingEvent.create(
            tracking_number=tracking_number,
            status=map_colissimo_code_to_status(checkpoint.code),
            message=checkpoint.label,
            location=self._extract_event_location(checkpoint),
            timestamp=timestamp,
            raw_data=checkpoint.model_dump(by_alias=True),
        )
        if result.is_failure:
            logger.warning(f"Skipping Colissimo event {checkpoint.code}: {result.error_message}")
            return None
        return result.value

    def _extract_event_location(self, checkpoint: ColissimoTimelineEventSchema) -> str:
        """Extract location from timeline checkpoint"""
        if checkpoint.site_name:
            if checkpoint.country_code:
                return f"{checkpoint.site_name}, {checkpoint.country_code}"
            return checkpoint.site_name
        return checkpoint.country_code or DEFAULT_COUNTRY
