"""
Normalized tracking status and the curated carrier tag vocabularies.

Every backend speaks its own status language. Each language gets one static
table here (or in its ``*_status_mapping`` module for numeric/code tables)
mapping onto the eight values of :class:`TrackingStatus`.

    PENDING -> INFO_RECEIVED -> IN_TRANSIT -> OUT_FOR_DELIVERY -> DELIVERED
                                           -> FAILED_ATTEMPT
                                           -> EXCEPTION
                                           -> EXPIRED
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Mapping

from parceltrack.core.exceptions import ErrorCode, UnrecognizedVocabularyException, ValidationException
from parceltrack.core.result import Result


class TrackingStatus(str, Enum):
    """Status of a shipment in its tracking lifecycle."""

    PENDING = "PENDING"
    INFO_RECEIVED = "INFO_RECEIVED"
    IN_TRANSIT = "IN_TRANSIT"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    FAILED_ATTEMPT = "FAILED_ATTEMPT"
    EXCEPTION = "EXCEPTION"
    EXPIRED = "EXPIRED"

    @property
    def label(self) -> str:
        """Human-readable label (French, as shown to buyers)."""
        return TRACKING_STATUS_LABELS[self]

    @property
    def order(self) -> int:
        """Rank for timeline display."""
        return TRACKING_STATUS_ORDER[self]

    @property
    def is_pending(self) -> bool:
        return self is TrackingStatus.PENDING

    @property
    def is_info_received(self) -> bool:
        return self is TrackingStatus.INFO_RECEIVED

    @property
    def is_in_transit(self) -> bool:
        return self is TrackingStatus.IN_TRANSIT

    @property
    def is_out_for_delivery(self) -> bool:
        return self is TrackingStatus.OUT_FOR_DELIVERY

    @property
    def is_delivered(self) -> bool:
        return self is TrackingStatus.DELIVERED

    @property
    def is_failed_attempt(self) -> bool:
        return self is TrackingStatus.FAILED_ATTEMPT

    @property
    def is_exception(self) -> bool:
        return self is TrackingStatus.EXCEPTION

    @property
    def is_expired(self) -> bool:
        return self is TrackingStatus.EXPIRED

    @property
    def is_final(self) -> bool:
        """Delivered or expired: nothing more will happen."""
        return self.is_delivered or self.is_expired

    @property
    def has_issue(self) -> bool:
        """A delivery attempt failed or the carrier reported a problem."""
        return self.is_failed_attempt or self.is_exception

    @property
    def is_active(self) -> bool:
        return not self.is_final

    @classmethod
    def from_string(cls, value: str) -> Result["TrackingStatus"]:
        """Case-insensitive parse of one of the eight status names."""

        if not isinstance(value, str):
            return Result.fail(ValidationException(
                f"Statut de suivi invalide: {value}",
                ErrorCode.INVALID_STATUS,
                {"value": value}
            ))

        candidate = value.strip().upper()
        try:
            return Result.ok(cls(candidate))
        except ValueError:
            return Result.fail(ValidationException(
                f"Statut de suivi invalide: {value}",
                ErrorCode.INVALID_STATUS,
                {"value": value}
            ))

    @classmethod
    def from_carrier_tag(
        cls,
        tag: str,
        vocabulary: "CarrierVocabulary | str"
    ) -> Result["TrackingStatus"]:
        """
        Map a carrier's own tag into the normalized status.

        The tag space of each vocabulary is closed: an unknown tag (or an
        unknown vocabulary) is an explicit failure, never a default.
        """
        if not CarrierVocabulary.has_value(vocabulary):
            return Result.fail(UnrecognizedVocabularyException(
                f"Vocabulaire transporteur non reconnu: {vocabulary}",
                {"vocabulary": str(vocabulary)}
            ))

        vocab = CarrierVocabulary(vocabulary)
        mapped = None
        if isinstance(tag, str):
            mapped = CARRIER_TAG_VOCABULARIES[vocab].get(tag.strip())
        if mapped is None:
            return Result.fail(UnrecognizedVocabularyException(
                f"Tag {vocab.value} non reconnu: {tag!r}",
                {"vocabulary": vocab.value, "tag": tag if isinstance(tag, str) else repr(tag)}
            ))
        return Result.ok(mapped)

    def __str__(self) -> str:
        return self.value


TRACKING_STATUS_LABELS: Dict[TrackingStatus, str] = {
    TrackingStatus.PENDING: "En attente",
    TrackingStatus.INFO_RECEIVED: "Informations recues",
    TrackingStatus.IN_TRANSIT: "En transit",
    TrackingStatus.OUT_FOR_DELIVERY: "En cours de livraison",
    TrackingStatus.DELIVERED: "Livre",
    TrackingStatus.FAILED_ATTEMPT: "Tentative echouee",
    TrackingStatus.EXCEPTION: "Probleme de livraison",
    TrackingStatus.EXPIRED: "Expire",
}

# FAILED_ATTEMPT and EXCEPTION are stalled near delivery, same rank as OUT_FOR_DELIVERY
TRACKING_STATUS_ORDER: Dict[TrackingStatus, int] = {
    TrackingStatus.PENDING: 1,
    TrackingStatus.INFO_RECEIVED: 2,
    TrackingStatus.IN_TRANSIT: 3,
    TrackingStatus.OUT_FOR_DELIVERY: 4,
    TrackingStatus.DELIVERED: 5,
    TrackingStatus.FAILED_ATTEMPT: 4,
    TrackingStatus.EXCEPTION: 4,
    TrackingStatus.EXPIRED: 6,
}


class CarrierVocabulary(str, Enum):
    """Tag vocabularies accepted by ``TrackingStatus.from_carrier_tag``."""

    AFTERSHIP = "aftership"
    INTERNAL = "internal"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Return True if the enum already defines the given value."""

        try:
            cls(value)
        except ValueError:
            return False
        return True


# AfterShip-style checkpoint tags (also used by the simulator checkpoints)
AFTERSHIP_TAG_TO_STATUS: Dict[str, TrackingStatus] = {
    "Pending": TrackingStatus.PENDING,
    "InfoReceived": TrackingStatus.INFO_RECEIVED,
    "InTransit": TrackingStatus.IN_TRANSIT,
    "OutForDelivery": TrackingStatus.OUT_FOR_DELIVERY,
    "Delivered": TrackingStatus.DELIVERED,
    "AttemptFail": TrackingStatus.FAILED_ATTEMPT,
    "AvailableForPickup": TrackingStatus.OUT_FOR_DELIVERY,
    "Exception": TrackingStatus.EXCEPTION,
    "Expired": TrackingStatus.EXPIRED,
}

INTERNAL_TAG_TO_STATUS: Dict[str, TrackingStatus] = {
    status.value: status for status in TrackingStatus
}

CARRIER_TAG_VOCABULARIES: Mapping[CarrierVocabulary, Mapping[str, TrackingStatus]] = {
    CarrierVocabulary.AFTERSHIP: AFTERSHIP_TAG_TO_STATUS,
    CarrierVocabulary.INTERNAL: INTERNAL_TAG_TO_STATUS,
}
