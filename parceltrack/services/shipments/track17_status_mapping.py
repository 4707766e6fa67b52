"""
Mapping tables for the 17TRACK aggregator.

17TRACK identifies carriers with numeric codes and reports the shipment
state as a numeric package status (``w1``). Both tables are static.
"""

from typing import Dict, Optional

from parceltrack.models.tracking_status import TrackingStatus

# Default status used when the 17TRACK status code is unknown/not mapped
DEFAULT_STATUS: TrackingStatus = TrackingStatus.IN_TRANSIT

# 17TRACK package status -> normalized status
TRACK17_STATUS_MAP: Dict[int, TrackingStatus] = {
    0: TrackingStatus.PENDING,            # Not Found
    10: TrackingStatus.IN_TRANSIT,        # In Transit
    20: TrackingStatus.EXPIRED,           # Expired
    30: TrackingStatus.EXCEPTION,         # Delivery Failed
    35: TrackingStatus.EXCEPTION,         # Abnormal
    40: TrackingStatus.DELIVERED,         # Delivered
    50: TrackingStatus.OUT_FOR_DELIVERY,  # Out for Delivery
}

# Carrier code (registry) -> 17TRACK numeric carrier code
TRACK17_CARRIER_CODES: Dict[str, int] = {
    "colissimo": 100003,
    "laposte": 100003,
    "chronopost": 100003,
    "mondial_relay": 190012,
    "dpd": 100007,
    "gls": 100008,
    "ups": 100001,
    "fedex": 100002,
    "dhl": 100004,
    "tnt": 100006,
}

TRACK17_CARRIER_NAMES: Dict[str, str] = {
    "colissimo": "Colissimo",
    "laposte": "La Poste",
    "chronopost": "Chronopost",
    "mondial_relay": "Mondial Relay",
    "dpd": "DPD",
    "gls": "GLS",
    "ups": "UPS",
    "fedex": "FedEx",
    "dhl": "DHL",
    "tnt": "TNT",
}


def map_track17_code_to_status(code: int | None) -> TrackingStatus:
    """Return the normalized status for a 17TRACK status code.

    A missing code is treated as 0 (not found yet -> PENDING);
    any other unmapped code falls back to DEFAULT_STATUS.
    """
    if code is None:
        code = 0
    return TRACK17_STATUS_MAP.get(code, DEFAULT_STATUS)


def get_track17_carrier_code(carrier: str | None) -> Optional[int]:
    """17TRACK numeric code for a carrier name, None when 17TRACK should auto-detect."""
    if not carrier:
        return None
    return TRACK17_CARRIER_CODES.get(carrier.strip().lower())


def get_carrier_name_for_track17_code(code: int | None) -> Optional[str]:
    """First carrier name registered under a 17TRACK numeric code."""
    if code is None:
        return None
    for name, carrier_code in TRACK17_CARRIER_CODES.items():
        if carrier_code == code:
            return name
    return None
