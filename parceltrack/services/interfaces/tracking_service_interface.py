from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from parceltrack.core.result import Result
from parceltrack.models.tracking_info import TrackingInfo


class ITrackingService(ABC):
    """Common interface for all tracking backends (Colissimo, 17TRACK, simulator)

    No operation raises: every outcome comes back as a Result.
    """

    name: str = "tracking"

    @abstractmethod
    def is_configured(self) -> bool:
        """
        Whether the backend has the credentials it needs.

        An unconfigured backend is never selected by the orchestrator.
        """
        pass

    @abstractmethod
    async def get_tracking(
        self,
        tracking_number: str,
        carrier: str,
        force_refresh: bool = False
    ) -> Result[TrackingInfo]:
        """
        Get normalized tracking information for one shipment

        Args:
            tracking_number: Carrier tracking number
            carrier: Canonical carrier code (e.g. "colissimo")
            force_refresh: Bypass any backend-side cache when supported

        Returns:
            Result with TrackingInfo (events newest first) or a typed failure
        """
        pass

    @abstractmethod
    async def create_tracking(
        self,
        tracking_number: str,
        carrier: str,
        metadata: Optional[Dict[str, str]] = None
    ) -> Result[None]:
        """Pre-register a shipment. Backends without registration return ok."""
        pass

    @abstractmethod
    async def delete_tracking(self, tracking_number: str, carrier: str) -> Result[None]:
        """Inverse of create_tracking. Backends without registration return ok."""
        pass

    @abstractmethod
    async def detect_carrier(self, tracking_number: str) -> Result[List[str]]:
        """Candidate carrier codes for a raw tracking number. Fails only on empty input."""
        pass
