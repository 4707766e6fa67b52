from pydantic import BaseModel, Field
from typing import List, Optional, Dict
from datetime import datetime

from parceltrack.models.tracking_event import TrackingEvent
from parceltrack.models.tracking_info import TrackingInfo


class TrackingEventSchema(BaseModel):
    """Evento di tracking normalizzato"""
    id: str = Field(..., description="Event identifier")
    status: str = Field(..., description="Normalized tracking status")
    status_label: str = Field(..., description="Human readable status label")
    message: str = Field(..., description="Checkpoint description")
    location: str = Field(..., description="Checkpoint location")
    timestamp: datetime = Field(..., description="Checkpoint time (UTC)")

    @classmethod
    def from_event(cls, event: TrackingEvent) -> "TrackingEventSchema":
        return cls(
            id=event.id,
            status=event.status.value,
            status_label=event.status.label,
            message=event.message,
            location=event.formatted_location,
            timestamp=event.timestamp,
        )


class TrackingInfoResponseSchema(BaseModel):
    """Stato di una spedizione con la timeline degli eventi (piu recente prima)"""
    tracking_number: str = Field(..., description="Tracking number")
    carrier: str = Field(..., description="Carrier code")
    carrier_name: str = Field(..., description="Carrier display name")
    current_status: str = Field(..., description="Current normalized status")
    status_label: str = Field(..., description="Human readable status label")
    is_final: bool = Field(..., description="Whether the status is terminal")
    estimated_delivery: Optional[datetime] = Field(None, description="Estimated delivery date")
    origin_address: Optional[str] = Field(None, description="Origin")
    destination_address: Optional[str] = Field(None, description="Destination")
    last_updated: datetime = Field(..., description="Time of the lookup")
    events: List[TrackingEventSchema] = Field(default_factory=list, description="Tracking events, newest first")

    @classmethod
    def from_info(cls, info: TrackingInfo) -> "TrackingInfoResponseSchema":
        return cls(
            tracking_number=info.tracking_number,
            carrier=info.carrier,
            carrier_name=info.carrier_name,
            current_status=info.current_status.value,
            status_label=info.current_status.label,
            is_final=info.current_status.is_final,
            estimated_delivery=info.estimated_delivery,
            origin_address=info.origin_address,
            destination_address=info.destination_address,
            last_updated=info.last_updated,
            events=[TrackingEventSchema.from_event(event) for event in info.events],
        )


class CreateTrackingRequest(BaseModel):
    """Registrazione di un numero di tracking presso il backend del corriere"""
    tracking_number: str = Field(..., min_length=1, description="Tracking number")
    carrier: str = Field(..., min_length=1, description="Carrier code or alias")
    metadata: Optional[Dict[str, str]] = Field(None, description="Free-form metadata")


class DetectCarrierResponse(BaseModel):
    carriers: List[str] = Field(..., description="Candidate carrier codes")


class CarrierCapabilitySchema(BaseModel):
    """Corriere supportato e backend effettivamente disponibile"""
    code: str = Field(..., description="Carrier code")
    name: str = Field(..., description="Carrier display name")
    has_direct_api: bool = Field(..., description="Direct carrier API configured")
    uses_fallback: bool = Field(..., description="Served through the 17TRACK aggregator")
    is_mock: bool = Field(..., description="Served by the simulator only")


class TrackingServiceStatusSchema(BaseModel):
    colissimo_configured: bool
    track17_configured: bool
    active_carriers: int
    mock_carriers: int
