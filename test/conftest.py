"""
Fixture condivise per i test del tracking
"""
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import httpx
import pytest

from parceltrack.core.result import Result
from parceltrack.models.tracking_event import TrackingEvent
from parceltrack.models.tracking_info import TrackingInfo
from parceltrack.models.tracking_status import TrackingStatus
from parceltrack.services.interfaces.tracking_service_interface import ITrackingService
from parceltrack.services.tracking.simulated_tracking_service import SimulatedTrackingService


class FakeTrackingService(ITrackingService):
    """Backend finto: risultato fisso e registro delle chiamate"""

    def __init__(self, name: str, configured: bool = True, result: Optional[Result] = None):
        self.name = name
        self.configured = configured
        self.result = result
        self.calls: List[tuple] = []

    def is_configured(self) -> bool:
        return self.configured

    async def get_tracking(self, tracking_number, carrier, force_refresh=False):
        self.calls.append(("get_tracking", tracking_number, carrier, force_refresh))
        if self.result is not None:
            return self.result
        return Result.ok(build_tracking_info(tracking_number, carrier))

    async def create_tracking(self, tracking_number, carrier, metadata=None):
        self.calls.append(("create_tracking", tracking_number, carrier, metadata))
        return Result.ok()

    async def delete_tracking(self, tracking_number, carrier):
        self.calls.append(("delete_tracking", tracking_number, carrier))
        return Result.ok()

    async def detect_carrier(self, tracking_number):
        return Result.ok([])


def build_tracking_info(tracking_number: str, carrier: str) -> TrackingInfo:
    now = datetime.now(timezone.utc)
    events = [
        TrackingEvent.create(tracking_number, TrackingStatus.INFO_RECEIVED, "Label created",
                             timestamp=now - timedelta(days=1)).value,
        TrackingEvent.create(tracking_number, TrackingStatus.IN_TRANSIT, "In transit", "Paris, FR",
                             timestamp=now).value,
    ]
    return TrackingInfo(
        tracking_number=tracking_number,
        carrier=carrier,
        carrier_name=carrier.upper(),
        current_status=TrackingStatus.IN_TRANSIT,
        events=events,
    )


@pytest.fixture
def fake_service() -> Callable[..., FakeTrackingService]:
    return FakeTrackingService


@pytest.fixture
def simulator() -> SimulatedTrackingService:
    return SimulatedTrackingService(min_delay_ms=0, max_delay_ms=0)


@pytest.fixture
def json_transport() -> Callable[..., httpx.MockTransport]:
    """
    Crea un MockTransport che risponde con il JSON dato.

    Le richieste ricevute sono salvate in ``transport.requests``.
    """

    def _factory(payload: object = None, status_code: int = 200, raw: Optional[str] = None) -> httpx.MockTransport:
        requests: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if raw is not None:
                return httpx.Response(status_code, text=raw)
            return httpx.Response(status_code, json=payload)

        transport = httpx.MockTransport(handler)
        transport.requests = requests
        return transport

    return _factory


@pytest.fixture
def failing_transport() -> Callable[[Exception], httpx.MockTransport]:
    def _factory(exc: Exception) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            raise exc

        return httpx.MockTransport(handler)

    return _factory


