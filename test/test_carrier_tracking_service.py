import pytest

from parceltrack.core.exceptions import (
    AuthenticationException,
    ErrorCode,
    ExceptionFactory,
    RateLimitException,
    UpstreamException,
    UpstreamTimeoutException,
)
from parceltrack.core.result import Result
from parceltrack.factories.carrier_registry import DIRECT_SERVICE_COLISSIMO
from parceltrack.factories.services.carrier_service_factory import CarrierServiceFactory
from parceltrack.services.tracking.carrier_tracking_service import CarrierTrackingService


def build_service(fake_service, simulator, colissimo=None, track17=None) -> CarrierTrackingService:
    factory = CarrierServiceFactory(
        direct_services={DIRECT_SERVICE_COLISSIMO: colissimo or fake_service("colissimo", configured=False)},
        aggregator_service=track17 or fake_service("track17", configured=False),
        simulator_service=simulator,
    )
    return CarrierTrackingService(factory=factory)


@pytest.mark.asyncio
async def test_end_to_end_detects_ups_and_uses_display_name(fake_service, simulator):
    service = build_service(fake_service, simulator)

    result = await service.get_tracking("1Z999AA10123456784")

    assert result.is_success
    info = result.value
    assert info.carrier == "ups"
    assert info.carrier_name == "UPS"
    assert info.tracking_number == "1Z999AA10123456784"
    timestamps = [e.timestamp for e in info.events]
    assert timestamps == sorted(timestamps, reverse=True)


@pytest.mark.asyncio
async def test_alias_is_canonicalized_before_adapter_call(fake_service, simulator):
    colissimo = fake_service("colissimo")
    service = build_service(fake_service, simulator, colissimo=colissimo)

    result = await service.get_tracking("  6A12345678901 ", "La-Poste", force_refresh=True)

    assert result.value.carrier_name == "Colissimo"
    assert colissimo.calls == [("get_tracking", "6A12345678901", "colissimo", True)]


@pytest.mark.asyncio
async def test_blank_tracking_number_is_validation_failure(fake_service, simulator):
    service = build_service(fake_service, simulator)

    result = await service.get_tracking("   ", "ups")

    assert result.error_code == ErrorCode.REQUIRED_FIELD_MISSING.value
    assert result.error.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [
    ExceptionFactory.not_configured("Colissimo"),
    UpstreamTimeoutException("timeout"),
    RateLimitException("quota"),
    UpstreamException("boom"),
])
async def test_unavailable_tier_falls_through_to_next(fake_service, simulator, error):
    colissimo = fake_service("colissimo", result=Result.fail(error))
    track17 = fake_service("track17")
    service = build_service(fake_service, simulator, colissimo=colissimo, track17=track17)

    result = await service.get_tracking("6A12345678901", "colissimo")

    assert result.is_success
    assert len(colissimo.calls) == 1
    assert len(track17.calls) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [
    ExceptionFactory.parcel_not_found("6A12345678901"),
    AuthenticationException("bad key"),
])
async def test_authoritative_failure_is_returned(fake_service, simulator, error):
    colissimo = fake_service("colissimo", result=Result.fail(error))
    track17 = fake_service("track17")
    service = build_service(fake_service, simulator, colissimo=colissimo, track17=track17)

    result = await service.get_tracking("6A12345678901", "colissimo")

    assert result.error is error
    assert track17.calls == []


@pytest.mark.asyncio
async def test_last_tier_failure_is_returned(fake_service):
    simulator = fake_service("simulator", result=Result.fail(UpstreamException("down")))
    service = build_service(fake_service, simulator)

    result = await service.get_tracking("1Z999AA10123456784", "ups")

    assert result.error_code == ErrorCode.EXTERNAL_SERVICE_ERROR.value


@pytest.mark.asyncio
@pytest.mark.parametrize("tracking_number,expected", [
    ("1Z999AA10123456784", ["ups"]),
    (" 1z999aa10123456784 ", ["ups"]),
    ("12345678901234", ["colissimo", "chronopost", "dpd", "fedex"]),
    ("hello-world!", ["colissimo", "chronopost", "mondial_relay"]),
])
async def test_detect_carrier(fake_service, simulator, tracking_number, expected):
    service = build_service(fake_service, simulator)

    result = await service.detect_carrier(tracking_number)

    assert result.value == expected


@pytest.mark.asyncio
async def test_detect_carrier_requires_number(fake_service, simulator):
    service = build_service(fake_service, simulator)

    result = await service.detect_carrier("")

    assert result.error_code == ErrorCode.REQUIRED_FIELD_MISSING.value


@pytest.mark.asyncio
async def test_create_and_delete_delegate_to_selected_backend(fake_service, simulator):
    track17 = fake_service("track17")
    service = build_service(fake_service, simulator, track17=track17)

    created = await service.create_tracking("1Z999AA10123456784", "UPS", {"order": "42"})
    deleted = await service.delete_tracking("1Z999AA10123456784", "UPS")

    assert created.is_success and deleted.is_success
    assert track17.calls == [
        ("create_tracking", "1Z999AA10123456784", "ups", {"order": "42"}),
        ("delete_tracking", "1Z999AA10123456784", "ups"),
    ]


@pytest.mark.asyncio
async def test_create_tracking_requires_carrier(fake_service, simulator):
    service = build_service(fake_service, simulator)

    result = await service.create_tracking("1Z999AA10123456784", "")

    assert result.error.details["field_name"] == "carrier"


def test_supported_carriers_without_credentials(fake_service, simulator):
    service = build_service(fake_service, simulator)

    carriers = service.get_supported_carriers()

    assert [c["code"] for c in carriers][:3] == ["colissimo", "chronopost", "mondial_relay"]
    assert all(c["is_mock"] for c in carriers)
    assert service.get_status() == {
        "colissimo_configured": False,
        "track17_configured": False,
        "active_carriers": 0,
        "mock_carriers": 8,
    }


def test_supported_carriers_with_credentials(fake_service, simulator):
    service = build_service(
        fake_service, simulator,
        colissimo=fake_service("colissimo"),
        track17=fake_service("track17"),
    )

    carriers = {c["code"]: c for c in service.get_supported_carriers()}

    assert carriers["colissimo"] == {
        "code": "colissimo", "name": "Colissimo",
        "has_direct_api": True, "uses_fallback": False, "is_mock": False,
    }
    assert carriers["ups"]["uses_fallback"]
    assert service.get_status()["active_carriers"] == 8
    assert service.is_configured()
