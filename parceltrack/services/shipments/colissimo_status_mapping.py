"""
Mapping between Colissimo timeline status codes and normalized tracking statuses.

Colissimo codes are alphanumeric (e.g. "DI1", "ET3", "PCHCFE"); only the first
three characters identify the family, so the lookup is keyed on that prefix.
"""

from typing import Dict

from parceltrack.models.tracking_status import TrackingStatus

# Default status used when the Colissimo code is unknown/not mapped
DEFAULT_STATUS: TrackingStatus = TrackingStatus.IN_TRANSIT

COLISSIMO_CODE_PREFIX_LENGTH: int = 3

# Colissimo code prefix -> normalized status
COLISSIMO_STATUS_MAP: Dict[str, TrackingStatus] = {
    # Pris en charge
    "PC1": TrackingStatus.INFO_RECEIVED,
    "PC2": TrackingStatus.INFO_RECEIVED,
    "ET1": TrackingStatus.IN_TRANSIT,
    "ET2": TrackingStatus.IN_TRANSIT,
    "ET3": TrackingStatus.IN_TRANSIT,
    "ET4": TrackingStatus.IN_TRANSIT,
    # En cours de livraison
    "DR1": TrackingStatus.OUT_FOR_DELIVERY,
    "DR2": TrackingStatus.OUT_FOR_DELIVERY,
    # Livré
    "DI1": TrackingStatus.DELIVERED,
    "DI2": TrackingStatus.DELIVERED,
    # Anomalie
    "AN1": TrackingStatus.EXCEPTION,
    "AN2": TrackingStatus.EXCEPTION,
    "RE1": TrackingStatus.EXCEPTION,
    # Instance (en point relais)
    "AG1": TrackingStatus.OUT_FOR_DELIVERY,
    "AG2": TrackingStatus.OUT_FOR_DELIVERY,
    # Retour
    "RT1": TrackingStatus.EXCEPTION,
    "RT2": TrackingStatus.EXCEPTION,
}


def map_colissimo_code_to_status(code: str | None) -> TrackingStatus:
    """Return the normalized status for a Colissimo code with safe fallback.

    - Normalizes the code to uppercase and trims whitespace
    - Looks up the fixed-length prefix
    - Falls back to DEFAULT_STATUS if missing/unknown
    """
    if not code:
        return DEFAULT_STATUS
    prefix = code.strip().upper()[:COLISSIMO_CODE_PREFIX_LENGTH]
    return COLISSIMO_STATUS_MAP.get(prefix, DEFAULT_STATUS)
