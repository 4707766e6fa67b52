from fastapi import APIRouter, Depends, Path, Query, Response, status
from typing import List, Optional
import logging

from parceltrack.schemas.tracking_schema import (
    CarrierCapabilitySchema,
    CreateTrackingRequest,
    DetectCarrierResponse,
    TrackingInfoResponseSchema,
    TrackingServiceStatusSchema,
)
from parceltrack.services.tracking.carrier_tracking_service import (
    CarrierTrackingService,
    get_tracking_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/tracking", tags=["Tracking"])


# Static paths are declared before /{tracking_number} so they are not shadowed.

@router.get("/carriers", response_model=List[CarrierCapabilitySchema])
async def get_supported_carriers(
    tracking_service: CarrierTrackingService = Depends(get_tracking_service)
):
    """Elenco dei corrieri supportati con il backend attivo per ciascuno"""
    return tracking_service.get_supported_carriers()


@router.get("/status", response_model=TrackingServiceStatusSchema)
async def get_tracking_status(
    tracking_service: CarrierTrackingService = Depends(get_tracking_service)
):
    """Stato di configurazione dei backend di tracking"""
    return tracking_service.get_status()


@router.get("/detect/{tracking_number}", response_model=DetectCarrierResponse)
async def detect_carrier(
    tracking_number: str = Path(..., description="Tracking number"),
    tracking_service: CarrierTrackingService = Depends(get_tracking_service)
):
    """
    Rileva i corrieri candidati dal formato del numero di tracking

    Returns:
        Lista ordinata di codici corriere; i corrieri francesi di default se nessun formato corrisponde
    """
    result = await tracking_service.detect_carrier(tracking_number)
    return DetectCarrierResponse(carriers=result.unwrap())


@router.get("/{tracking_number}", response_model=TrackingInfoResponseSchema)
async def get_tracking(
    tracking_number: str = Path(..., description="Tracking number"),
    carrier: Optional[str] = Query(None, description="Carrier code or alias, detected when omitted"),
    force_refresh: bool = Query(False, description="Bypass upstream caches"),
    tracking_service: CarrierTrackingService = Depends(get_tracking_service)
):
    """
    Recupera lo stato e la timeline di una spedizione

    Args:
        tracking_number: Numero di tracking
        carrier: Codice corriere (opzionale)
        force_refresh: Forza l'aggiornamento presso il corriere
    """
    logger.info(f"Tracking request for {tracking_number} (carrier={carrier})")
    result = await tracking_service.get_tracking(tracking_number, carrier, force_refresh)
    return TrackingInfoResponseSchema.from_info(result.unwrap())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_tracking(
    request: CreateTrackingRequest,
    tracking_service: CarrierTrackingService = Depends(get_tracking_service)
):
    """Registra un numero di tracking presso il backend del corriere"""
    result = await tracking_service.create_tracking(request.tracking_number, request.carrier, request.metadata)
    result.unwrap()
    return {"tracking_number": request.tracking_number.strip(), "carrier": request.carrier}


@router.delete("/{carrier}/{tracking_number}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tracking(
    carrier: str = Path(..., description="Carrier code or alias"),
    tracking_number: str = Path(..., description="Tracking number"),
    tracking_service: CarrierTrackingService = Depends(get_tracking_service)
):
    """Rimuove la registrazione di un numero di tracking"""
    result = await tracking_service.delete_tracking(tracking_number, carrier)
    result.unwrap()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
