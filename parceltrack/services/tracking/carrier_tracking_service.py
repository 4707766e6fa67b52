import logging
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional

from parceltrack.core.exceptions import ErrorCode, ExceptionFactory
from parceltrack.core.result import Result
from parceltrack.factories.carrier_registry import (
    CARRIER_REGISTRY,
    DEFAULT_CARRIERS,
    DIRECT_SERVICE_COLISSIMO,
    CarrierConfig,
    get_carrier_name,
    normalize_carrier_code,
    resolve_carrier,
)
from parceltrack.factories.services.carrier_service_factory import CarrierServiceFactory
from parceltrack.models.tracking_info import TrackingInfo
from parceltrack.services.interfaces.tracking_service_interface import ITrackingService

logger = logging.getLogger(__name__)

# Failures meaning "this tier is unavailable right now": try the next tier.
# NOT_FOUND, INVALID_CREDENTIALS and validation errors are final answers.
TIER_UNAVAILABLE_CODES = frozenset({
    ErrorCode.CONFIGURATION_ERROR.value,
    ErrorCode.UPSTREAM_TIMEOUT.value,
    ErrorCode.RATE_LIMITED.value,
    ErrorCode.EXTERNAL_SERVICE_ERROR.value,
})


class CarrierTrackingService(ITrackingService):
    """
    Aggregates the carrier tracking backends behind one interface.

    Priority order for each carrier:
    1. Carrier-specific API (Colissimo, when configured with an API key)
    2. 17TRACK aggregator (when configured)
    3. Simulator (development / last resort)

    Retry and backoff are left to callers: each tier is tried once.
    """

    name = "carrier_tracking"

    def __init__(
        self,
        factory: Optional[CarrierServiceFactory] = None,
        registry: Mapping[str, CarrierConfig] = CARRIER_REGISTRY
    ):
        self.registry = registry
        self.factory = factory or CarrierServiceFactory(registry=registry)

    def is_configured(self) -> bool:
        # The simulator tier is always available
        return True

    def get_service_for_carrier(self, carrier: str) -> ITrackingService:
        return self.factory.get_service_for_carrier(carrier)

    def get_carrier_name(self, carrier: str) -> str:
        return get_carrier_name(carrier, self.registry)

    async def get_tracking(
        self,
        tracking_number: str,
        carrier: Optional[str] = None,
        force_refresh: bool = False
    ) -> Result[TrackingInfo]:
        """
        Look up a shipment, detecting the carrier when it is not given

        Args:
            tracking_number: Carrier tracking number
            carrier: Carrier code or alias; detected from the number when omitted
            force_refresh: Forwarded to the selected backend

        Returns:
            Result with TrackingInfo whose carrier_name is the registry display name
        """
        if not tracking_number or not tracking_number.strip():
            return Result.fail(ExceptionFactory.tracking_number_required())

        tracking_number = tracking_number.strip()

        if not carrier or not carrier.strip():
            detected = await self.detect_carrier(tracking_number)
            if detected.is_failure or not detected.value:
                return Result.fail(ExceptionFactory.carrier_required())
            carrier = detected.value[0]
            logger.info(f"Detected carrier {carrier} for {tracking_number}")

        carrier_code = self._canonical_code(carrier)
        result: Result[TrackingInfo] = Result.fail(ExceptionFactory.not_configured("Tracking"))

        for service in self.factory.get_candidate_services(carrier):
            logger.info(f"Getting {carrier_code} tracking for {tracking_number} via {service.name}")
            result = await service.get_tracking(tracking_number, carrier_code, force_refresh)

            if result.is_success:
                result.value.carrier_name = self.get_carrier_name(carrier)
                return result

            if result.error_code not in TIER_UNAVAILABLE_CODES:
                return result

            logger.warning(
                f"{service.name} unavailable for {carrier_code}:{tracking_number} "
                f"({result.error_code}), trying next tier"
            )

        logger.error(f"Every tracking tier failed for {carrier_code}:{tracking_number}")
        return result

    async def create_tracking(
        self,
        tracking_number: str,
        carrier: str,
        metadata: Optional[Dict[str, str]] = None
    ) -> Result[None]:
        if not carrier or not carrier.strip():
            return Result.fail(ExceptionFactory.carrier_required())
        service = self.get_service_for_carrier(carrier)
        return await service.create_tracking(tracking_number, self._canonical_code(carrier), metadata)

    async def delete_tracking(self, tracking_number: str, carrier: str) -> Result[None]:
        if not carrier or not carrier.strip():
            return Result.fail(ExceptionFactory.carrier_required())
        service = self.get_service_for_carrier(carrier)
        return await service.delete_tracking(tracking_number, self._canonical_code(carrier))

    async def detect_carrier(self, tracking_number: str) -> Result[List[str]]:
        """
        Union of every registry carrier whose patterns match the number

        Falls back to the default French carriers when nothing matches.
        """
        if not tracking_number or not tracking_number.strip():
            return Result.fail(ExceptionFactory.tracking_number_required())

        cleaned = tracking_number.strip().upper()
        detected = [code for code, config in self.registry.items() if config.matches(cleaned)]

        if not detected:
            return Result.ok(list(DEFAULT_CARRIERS))
        return Result.ok(detected)

    def get_supported_carriers(self) -> List[Dict[str, Any]]:
        """List every registered carrier with its resolved capability flags"""
        carriers: List[Dict[str, Any]] = []
        for code, config in self.registry.items():
            has_direct_api = self.factory.has_direct_api(config)
            uses_fallback = self.factory.uses_fallback(config)
            carriers.append({
                "code": code,
                "name": config.name,
                "has_direct_api": has_direct_api,
                "uses_fallback": uses_fallback,
                "is_mock": not (has_direct_api or uses_fallback),
            })
        return carriers

    def get_status(self) -> Dict[str, Any]:
        """Configuration summary of the tracking tiers"""
        carriers = self.get_supported_carriers()
        colissimo = self.factory.direct_services.get(DIRECT_SERVICE_COLISSIMO)
        return {
            "colissimo_configured": colissimo is not None and colissimo.is_configured(),
            "track17_configured": self.factory.aggregator_service.is_configured(),
            "active_carriers": sum(1 for c in carriers if not c["is_mock"]),
            "mock_carriers": sum(1 for c in carriers if c["is_mock"]),
        }

    def _canonical_code(self, carrier: str) -> str:
        config = resolve_carrier(carrier, self.registry)
        return config.code if config is not None else normalize_carrier_code(carrier)


@lru_cache()
def get_tracking_service() -> CarrierTrackingService:
    """Get cached process-wide tracking service instance"""
    return CarrierTrackingService()
