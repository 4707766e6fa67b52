import json

import httpx
import pytest

from parceltrack.core.exceptions import ErrorCode
from parceltrack.models.tracking_status import TrackingStatus
from parceltrack.services.shipments.track17_client import Track17Client
from parceltrack.services.shipments.track17_status_mapping import (
    get_carrier_name_for_track17_code,
    get_track17_carrier_code,
    map_track17_code_to_status,
)
from parceltrack.services.tracking.track17_tracking_service import Track17TrackingService

BASE_URL = "https://track17.test/track/v2.2"


def accepted_response(track: dict, number: str = "1Z999AA10123456784", carrier: int = 100001) -> dict:
    return {
        "code": 0,
        "data": {
            "accepted": [{"no": number, "carrier": carrier, "track": track}],
            "rejected": [],
        },
    }


DELIVERED_TRACK = {
    "e": 0,
    "w1": 40,
    "z0": {"a": "PARIS", "c": "FR", "d": "Delivered", "z": "2024-05-03T14:00:00Z"},
    "z1": [
        {"a": "LYON", "c": "FR", "d": "Departed facility", "z": "2024-05-02T08:00:00Z"},
        {"a": None, "c": "FR", "d": "Label created", "z": "2024-05-01T08:00:00Z"},
    ],
    "z2": {"a": "Lyon, FR", "b": "Paris, FR", "d": "2024-05-03T18:00:00Z"},
}


def make_service(transport, api_key="test-token") -> Track17TrackingService:
    client = Track17Client(api_key=api_key, base_url=BASE_URL, timeout=1.0, transport=transport)
    return Track17TrackingService(track17_client=client)


@pytest.mark.parametrize("code,expected", [
    (None, TrackingStatus.PENDING),
    (0, TrackingStatus.PENDING),
    (10, TrackingStatus.IN_TRANSIT),
    (20, TrackingStatus.EXPIRED),
    (35, TrackingStatus.EXCEPTION),
    (40, TrackingStatus.DELIVERED),
    (50, TrackingStatus.OUT_FOR_DELIVERY),
    (999, TrackingStatus.IN_TRANSIT),
])
def test_track17_status_mapping(code, expected):
    assert map_track17_code_to_status(code) is expected


def test_track17_carrier_codes():
    assert get_track17_carrier_code("UPS") == 100001
    assert get_track17_carrier_code("unknown") is None
    assert get_track17_carrier_code(None) is None
    assert get_carrier_name_for_track17_code(100003) == "colissimo"
    assert get_carrier_name_for_track17_code(1) is None


@pytest.mark.asyncio
async def test_get_tracking_normalizes_response(json_transport):
    transport = json_transport(accepted_response(DELIVERED_TRACK))
    service = make_service(transport)

    result = await service.get_tracking("1Z999AA10123456784", "ups")

    assert result.is_success
    info = result.value
    assert info.carrier == "ups"
    assert info.carrier_name == "UPS"
    assert info.current_status is TrackingStatus.DELIVERED
    assert [e.message for e in info.events] == ["Delivered", "Departed facility", "Label created"]
    assert info.events[2].location == "FR"
    assert info.origin_address == "Lyon, FR"
    assert info.destination_address == "Paris, FR"
    assert info.estimated_delivery is not None

    request = transport.requests[0]
    assert request.url.path.endswith("/gettrackinfo")
    assert request.headers["17token"] == "test-token"
    assert json.loads(request.content) == [{"number": "1Z999AA10123456784", "carrier": 100001}]


@pytest.mark.asyncio
async def test_latest_event_is_not_duplicated(json_transport):
    track = dict(DELIVERED_TRACK)
    track["z1"] = [DELIVERED_TRACK["z0"]] + DELIVERED_TRACK["z1"]
    service = make_service(json_transport(accepted_response(track)))

    result = await service.get_tracking("1Z999AA10123456784", "ups")

    assert len(result.value.events) == 3


@pytest.mark.asyncio
async def test_unknown_carrier_is_sent_without_code(json_transport):
    transport = json_transport(accepted_response(DELIVERED_TRACK))
    service = make_service(transport)

    result = await service.get_tracking("1Z999AA10123456784", "poste_italiane")

    assert result.value.carrier_name == "POSTE_ITALIANE"
    assert json.loads(transport.requests[0].content) == [{"number": "1Z999AA10123456784"}]


@pytest.mark.asyncio
async def test_rejected_number_is_not_found(json_transport):
    payload = {
        "code": 0,
        "data": {
            "accepted": [],
            "rejected": [{"number": "XX", "error": {"code": -18019909, "message": "No tracking information"}}],
        },
    }
    service = make_service(json_transport(payload))

    result = await service.get_tracking("XX", "ups")

    assert result.error_code == ErrorCode.TRACKING_NOT_FOUND.value
    assert result.error_message == "No tracking information"


@pytest.mark.asyncio
async def test_track_error_flag_is_not_found(json_transport):
    service = make_service(json_transport(accepted_response({"e": 1})))

    result = await service.get_tracking("1Z999AA10123456784", "ups")

    assert result.error_code == ErrorCode.TRACKING_NOT_FOUND.value


@pytest.mark.asyncio
async def test_without_token_is_configuration_error(json_transport):
    transport = json_transport(accepted_response(DELIVERED_TRACK))
    service = make_service(transport, api_key="")

    result = await service.get_tracking("1Z999AA10123456784", "ups")

    assert result.error_code == ErrorCode.CONFIGURATION_ERROR.value
    assert transport.requests == []


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code,error_code", [
    (401, ErrorCode.INVALID_CREDENTIALS),
    (429, ErrorCode.RATE_LIMITED),
    (500, ErrorCode.EXTERNAL_SERVICE_ERROR),
])
async def test_http_errors(json_transport, status_code, error_code):
    service = make_service(json_transport({}, status_code=status_code))

    result = await service.get_tracking("1Z999AA10123456784", "ups")

    assert result.error_code == error_code.value


@pytest.mark.asyncio
async def test_envelope_error_code_is_upstream_error(json_transport):
    service = make_service(json_transport({"code": -18010002, "data": {}}))

    result = await service.get_tracking("1Z999AA10123456784", "ups")

    assert result.error_code == ErrorCode.EXTERNAL_SERVICE_ERROR.value


@pytest.mark.asyncio
async def test_timeout(failing_transport):
    service = make_service(failing_transport(httpx.ConnectTimeout("too slow")))

    result = await service.get_tracking("1Z999AA10123456784", "ups")

    assert result.error_code == ErrorCode.UPSTREAM_TIMEOUT.value


@pytest.mark.asyncio
async def test_detect_carrier_uses_register(json_transport):
    transport = json_transport({"code": 0, "data": {"accepted": [{"no": "JD014600006281230301", "carrier": 100004}]}})
    service = make_service(transport)

    result = await service.detect_carrier("JD014600006281230301")

    assert result.value == ["dhl"]
    assert transport.requests[0].url.path.endswith("/register")


@pytest.mark.asyncio
async def test_detect_carrier_falls_back_to_defaults_on_error(json_transport):
    service = make_service(json_transport({}, status_code=500))

    result = await service.detect_carrier("JD014600006281230301")

    assert result.value == ["colissimo", "chronopost", "mondial_relay"]


@pytest.mark.asyncio
async def test_detect_carrier_requires_number(json_transport):
    service = make_service(json_transport({}))

    result = await service.detect_carrier(" ")

    assert result.error_code == ErrorCode.REQUIRED_FIELD_MISSING.value


@pytest.mark.asyncio
async def test_events_without_time_are_skipped(json_transport):
    track = dict(DELIVERED_TRACK)
    track["z0"] = {"a": "PARIS", "c": "FR", "d": "Delivered", "z": None}
    track["z1"] = DELIVERED_TRACK["z1"] + [{"a": "LYON", "c": "FR", "d": "Sorted"}]
    service = make_service(json_transport(accepted_response(track)))

    result = await service.get_tracking("1Z999AA10123456784", "ups")

    assert result.is_success
    assert [e.message for e in result.value.events] == ["Departed facility", "Label created"]
    assert result.value.current_status is TrackingStatus.DELIVERED
