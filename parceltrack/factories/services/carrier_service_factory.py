"""
Factory for selecting the tracking backend of a carrier at call time
"""
from typing import Dict, List, Mapping, Optional
import logging

from parceltrack.factories.carrier_registry import (
    CARRIER_REGISTRY,
    DIRECT_SERVICE_COLISSIMO,
    CarrierConfig,
    resolve_carrier,
)
from parceltrack.services.interfaces.tracking_service_interface import ITrackingService
from parceltrack.services.tracking.colissimo_tracking_service import ColissimoTrackingService
from parceltrack.services.tracking.simulated_tracking_service import SimulatedTrackingService
from parceltrack.services.tracking.track17_tracking_service import Track17TrackingService

logger = logging.getLogger(__name__)


class CarrierServiceFactory:
    """
    Selects the tracking service for a carrier.

    Priority:
    1. Carrier-specific API, if the registry names one and it is configured
    2. 17TRACK aggregator, if the carrier is fallback-eligible and 17TRACK is configured
    3. Simulator, unconditionally
    """

    def __init__(
        self,
        direct_services: Optional[Dict[str, ITrackingService]] = None,
        aggregator_service: Optional[ITrackingService] = None,
        simulator_service: Optional[ITrackingService] = None,
        registry: Mapping[str, CarrierConfig] = CARRIER_REGISTRY
    ):
        if direct_services is None:
            direct_services = {DIRECT_SERVICE_COLISSIMO: ColissimoTrackingService()}
        self.direct_services = dict(direct_services)
        self.aggregator_service = aggregator_service or Track17TrackingService()
        self.simulator_service = simulator_service or SimulatedTrackingService()
        self.registry = registry

    def get_candidate_services(self, carrier: str) -> List[ITrackingService]:
        """
        Eligible services for a carrier, in priority order.

        Only configured services are returned; the simulator is always last.

        Args:
            carrier: Carrier code or alias (any case, hyphens/spaces allowed)

        Returns:
            Non-empty list of ITrackingService
        """
        config = resolve_carrier(carrier, self.registry) if carrier else None
        candidates: List[ITrackingService] = []

        if config is not None and config.direct_service:
            direct = self.direct_services.get(config.direct_service)
            if direct is not None and direct.is_configured():
                candidates.append(direct)

        if config is not None and config.use_fallback and self.aggregator_service.is_configured():
            candidates.append(self.aggregator_service)

        candidates.append(self.simulator_service)
        return candidates

    def get_service_for_carrier(self, carrier: str) -> ITrackingService:
        """
        Get the highest-priority configured tracking service for a carrier

        Args:
            carrier: Carrier code or alias

        Returns:
            ITrackingService implementation for the carrier
        """
        service = self.get_candidate_services(carrier)[0]
        logger.debug(f"Selected {service.name} tracking service for carrier {carrier!r}")
        return service

    def has_direct_api(self, config: CarrierConfig) -> bool:
        if not config.direct_service:
            return False
        direct = self.direct_services.get(config.direct_service)
        return direct is not None and direct.is_configured()

    def uses_fallback(self, config: CarrierConfig) -> bool:
        return (
            not self.has_direct_api(config)
            and config.use_fallback
            and self.aggregator_service.is_configured()
        )
