import re
import asyncio
import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from parceltrack.core.exceptions import AlreadyExistsError, ExceptionFactory, NotFoundException
from parceltrack.core.result import Result
from parceltrack.factories.carrier_registry import DEFAULT_CARRIERS
from parceltrack.core.settings import get_carrier_integration_settings
from parceltrack.models.tracking_event import TrackingEvent
from parceltrack.models.tracking_info import TrackingInfo
from parceltrack.services.interfaces.tracking_service_interface import ITrackingService
from parceltrack.services.shipments.track17_status_mapping import TRACK17_CARRIER_NAMES
from parceltrack.services.tracking.simulation_scenarios import get_scenario_for_tracking_number

logger = logging.getLogger(__name__)

DEFAULT_COUNTRY = "France"

_NUMERIC_12_22 = re.compile(r"^\d{12,22}$")
_UPU_S10 = re.compile(r"^[A-Z]{2}\d{9}[A-Z]{2}$")


class SimulatedTrackingService(ITrackingService):
    """
    Offline tracking backend for development and last-resort fallback.

    Timelines are synthesized from a fixed scenario table, anchored on now.
    Registrations live in a process-local dict keyed ``carrier:number`` and
    are lost on restart. Every call sleeps a random delay so async callers
    see realistic latency.
    """

    name = "simulator"

    def __init__(self, min_delay_ms: Optional[int] = None, max_delay_ms: Optional[int] = None):
        settings = get_carrier_integration_settings()
        self.min_delay_ms = settings.tracking_simulator_min_delay_ms if min_delay_ms is None else min_delay_ms
        self.max_delay_ms = settings.tracking_simulator_max_delay_ms if max_delay_ms is None else max_delay_ms
        self._registered_trackings: Dict[str, Dict[str, object]] = {}

    def is_configured(self) -> bool:
        return True

    async def get_tracking(
        self,
        tracking_number: str,
        carrier: str,
        force_refresh: bool = False
    ) -> Result[TrackingInfo]:
        await self._simulate_delay()

        if not tracking_number or not tracking_number.strip():
            return Result.fail(ExceptionFactory.tracking_number_required())
        if not carrier or not carrier.strip():
            return Result.fail(ExceptionFactory.carrier_required())

        tracking_number = tracking_number.strip()
        carrier = carrier.strip()
        scenario = get_scenario_for_tracking_number(tracking_number)
        now = datetime.now(timezone.utc)

        events: List[TrackingEvent] = []
        for checkpoint in scenario.checkpoints:
            result = TrackingEvent.create(
                tracking_number=tracking_number,
                status=checkpoint.status,
                message=checkpoint.message,
                location=checkpoint.location,
                timestamp=now - timedelta(days=checkpoint.days_ago, hours=checkpoint.hours_ago),
            )
            if result.is_failure:
                return Result.fail(result.error)
            events.append(result.value)

        estimated_delivery = None
        if scenario.estimated_delivery_days is not None:
            estimated_delivery = now + timedelta(days=scenario.estimated_delivery_days)

        logger.debug(f"Simulated {scenario.status.value} timeline for {carrier}:{tracking_number}")

        return Result.ok(TrackingInfo(
            tracking_number=tracking_number,
            carrier=carrier,
            carrier_name=TRACK17_CARRIER_NAMES.get(carrier, carrier.upper()),
            current_status=scenario.status,
            estimated_delivery=estimated_delivery,
            events=events,
            origin_address=DEFAULT_COUNTRY,
            destination_address=DEFAULT_COUNTRY,
            last_updated=now,
        ))

    async def create_tracking(
        self,
        tracking_number: str,
        carrier: str,
        metadata: Optional[Dict[str, str]] = None
    ) -> Result[None]:
        await self._simulate_delay()

        if not tracking_number or not tracking_number.strip():
            return Result.fail(ExceptionFactory.tracking_number_required())
        if not carrier or not carrier.strip():
            return Result.fail(ExceptionFactory.carrier_required())

        if self.is_registered(tracking_number, carrier):
            return Result.fail(AlreadyExistsError(
                "Ce numero de suivi est deja enregistre",
                {"tracking_number": tracking_number.strip(), "carrier": carrier.strip()}
            ))

        key = self._get_tracking_key(tracking_number, carrier)
        self._registered_trackings[key] = {"carrier": carrier.strip(), "metadata": dict(metadata or {})}
        return Result.ok()

    async def delete_tracking(self, tracking_number: str, carrier: str) -> Result[None]:
        await self._simulate_delay()

        if not self.is_registered(tracking_number or "", carrier or ""):
            return Result.fail(NotFoundException(
                "Numero de suivi non trouve",
                {"tracking_number": tracking_number, "carrier": carrier}
            ))

        del self._registered_trackings[self._get_tracking_key(tracking_number, carrier)]
        return Result.ok()

    async def detect_carrier(self, tracking_number: str) -> Result[List[str]]:
        await self._simulate_delay()

        if not tracking_number or not tracking_number.strip():
            return Result.fail(ExceptionFactory.tracking_number_required())

        upper = tracking_number.strip().upper()

        if upper.startswith("1Z"):
            return Result.ok(["ups"])
        if _NUMERIC_12_22.match(upper):
            return Result.ok(["fedex", "dhl"])
        if _UPU_S10.match(upper):
            return Result.ok(["colissimo", "laposte"])
        if upper.startswith("JD"):
            return Result.ok(["dhl"])

        return Result.ok(list(DEFAULT_CARRIERS))

    def is_registered(self, tracking_number: str, carrier: str) -> bool:
        return self._get_tracking_key(tracking_number, carrier) in self._registered_trackings

    def _get_tracking_key(self, tracking_number: str, carrier: str) -> str:
        return f"{carrier.strip()}:{tracking_number.strip()}"

    async def _simulate_delay(self) -> None:
        if self.max_delay_ms <= 0:
            return
        delay_ms = random.uniform(self.min_delay_ms, max(self.min_delay_ms, self.max_delay_ms))
        await asyncio.sleep(delay_ms / 1000)
