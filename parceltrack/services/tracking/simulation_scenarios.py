"""
Scenario table for the offline tracking simulator.

The scenario is picked from the last character of the tracking number so the
same number always yields the same timeline.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from parceltrack.models.tracking_status import TrackingStatus


@dataclass(frozen=True, slots=True)
class SimulatedCheckpoint:
    status: TrackingStatus
    message: str
    location: str
    days_ago: int
    hours_ago: int = 0


@dataclass(frozen=True, slots=True)
class SimulationScenario:
    status: TrackingStatus
    checkpoints: Tuple[SimulatedCheckpoint, ...]
    estimated_delivery_days: Optional[int] = None


SIMULATION_SCENARIOS: Dict[TrackingStatus, SimulationScenario] = {
    TrackingStatus.DELIVERED: SimulationScenario(
        status=TrackingStatus.DELIVERED,
        checkpoints=(
            SimulatedCheckpoint(TrackingStatus.PENDING, "Colis pris en charge", "Lyon, France", 5, 2),
            SimulatedCheckpoint(
                TrackingStatus.INFO_RECEIVED, "Informations recues par le transporteur", "Lyon, France", 5
            ),
            SimulatedCheckpoint(TrackingStatus.IN_TRANSIT, "Colis en transit", "Paris Hub, France", 4),
            SimulatedCheckpoint(TrackingStatus.IN_TRANSIT, "Arrive au centre de tri", "Paris Hub, France", 3),
            SimulatedCheckpoint(
                TrackingStatus.OUT_FOR_DELIVERY, "Colis en cours de livraison", "Paris 75001, France", 2, 4
            ),
            SimulatedCheckpoint(
                TrackingStatus.DELIVERED, "Colis livre - signe par: DUPONT", "Paris 75001, France", 2
            ),
        ),
    ),
    TrackingStatus.IN_TRANSIT: SimulationScenario(
        status=TrackingStatus.IN_TRANSIT,
        checkpoints=(
            SimulatedCheckpoint(TrackingStatus.PENDING, "Colis pris en charge", "Marseille, France", 3, 1),
            SimulatedCheckpoint(
                TrackingStatus.INFO_RECEIVED, "Informations recues par le transporteur", "Marseille, France", 3
            ),
            SimulatedCheckpoint(TrackingStatus.IN_TRANSIT, "Colis en transit", "Lyon Hub, France", 2),
            SimulatedCheckpoint(TrackingStatus.IN_TRANSIT, "En cours de transfert", "Paris Hub, France", 1),
        ),
        estimated_delivery_days=1,
    ),
    TrackingStatus.OUT_FOR_DELIVERY: SimulationScenario(
        status=TrackingStatus.OUT_FOR_DELIVERY,
        checkpoints=(
            SimulatedCheckpoint(TrackingStatus.PENDING, "Colis pris en charge", "Bordeaux, France", 4, 1),
            SimulatedCheckpoint(
                TrackingStatus.INFO_RECEIVED, "Informations recues par le transporteur", "Bordeaux, France", 4
            ),
            SimulatedCheckpoint(TrackingStatus.IN_TRANSIT, "Colis en transit", "Toulouse Hub, France", 3),
            SimulatedCheckpoint(
                TrackingStatus.IN_TRANSIT, "Arrive au centre de distribution", "Toulouse, France", 1
            ),
            SimulatedCheckpoint(
                TrackingStatus.OUT_FOR_DELIVERY, "Colis en cours de livraison", "Toulouse 31000, France", 0, 3
            ),
        ),
    ),
    TrackingStatus.EXCEPTION: SimulationScenario(
        status=TrackingStatus.EXCEPTION,
        checkpoints=(
            SimulatedCheckpoint(TrackingStatus.PENDING, "Colis pris en charge", "Nice, France", 5, 1),
            SimulatedCheckpoint(
                TrackingStatus.INFO_RECEIVED, "Informations recues par le transporteur", "Nice, France", 5
            ),
            SimulatedCheckpoint(TrackingStatus.IN_TRANSIT, "Colis en transit", "Marseille Hub, France", 4),
            SimulatedCheckpoint(
                TrackingStatus.FAILED_ATTEMPT, "Tentative de livraison echouee - Absent", "Paris 75002, France", 2
            ),
            SimulatedCheckpoint(
                TrackingStatus.EXCEPTION, "Colis en attente - Adresse incorrecte", "Paris, France", 1
            ),
        ),
    ),
    TrackingStatus.PENDING: SimulationScenario(
        status=TrackingStatus.PENDING,
        checkpoints=(
            SimulatedCheckpoint(
                TrackingStatus.PENDING, "Etiquette creee - En attente de prise en charge", "Lille, France", 1
            ),
        ),
        estimated_delivery_days=4,
    ),
}

# Last character of the tracking number -> scenario; anything else is PENDING
SCENARIO_BUCKETS: Dict[str, TrackingStatus] = {
    **{c: TrackingStatus.DELIVERED for c in ("0", "1", "2", "A", "B")},
    **{c: TrackingStatus.IN_TRANSIT for c in ("3", "4", "5", "C", "D")},
    **{c: TrackingStatus.OUT_FOR_DELIVERY for c in ("6", "7", "E", "F")},
    **{c: TrackingStatus.EXCEPTION for c in ("8", "G", "H")},
}


def get_scenario_for_tracking_number(tracking_number: str) -> SimulationScenario:
    """Deterministic scenario bucket for a tracking number."""
    last_char = tracking_number.strip()[-1:].upper()
    bucket = SCENARIO_BUCKETS.get(last_char, TrackingStatus.PENDING)
    return SIMULATION_SCENARIOS[bucket]
