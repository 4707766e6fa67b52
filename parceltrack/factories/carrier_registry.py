"""
Static carrier registry: display names, aliases, detection patterns and
fallback eligibility for every supported carrier.

The registry is built once and exposed read-only. Reloading configuration
means building a new registry and swapping it whole.
"""
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

# Keys of the carrier-specific adapters known to the factory
DIRECT_SERVICE_COLISSIMO = "colissimo"


@dataclass(frozen=True, slots=True)
class CarrierConfig:
    """Registry entry for one carrier"""

    code: str
    name: str
    aliases: Tuple[str, ...] = ()
    patterns: Tuple[re.Pattern, ...] = ()
    direct_service: Optional[str] = None
    use_fallback: bool = True

    def matches(self, tracking_number: str) -> bool:
        return any(pattern.match(tracking_number) for pattern in self.patterns)


def normalize_carrier_code(carrier: str) -> str:
    """Lowercase, hyphens and whitespace become underscores."""
    return re.sub(r"[-\s]", "_", carrier.strip().lower())


def _patterns(*expressions: str) -> Tuple[re.Pattern, ...]:
    return tuple(re.compile(expression, re.IGNORECASE) for expression in expressions)


def _aliases(*aliases: str) -> Tuple[str, ...]:
    return tuple(normalize_carrier_code(alias) for alias in aliases)


def build_carrier_registry() -> Mapping[str, CarrierConfig]:
    """Build the immutable carrier registry (insertion order is detection order)."""
    entries = (
        # Colissimo / La Poste - direct API available (free)
        CarrierConfig(
            code="colissimo",
            name="Colissimo",
            aliases=_aliases("laposte", "la-poste", "la_poste"),
            patterns=_patterns(r"^[A-Z]{2}\d{9}FR$", r"^\d{11,15}$", r"^[A-Z0-9]{13}$"),
            direct_service=DIRECT_SERVICE_COLISSIMO,
        ),
        CarrierConfig(
            code="chronopost",
            name="Chronopost",
            aliases=_aliases("chrono"),
            patterns=_patterns(r"^[A-Z]{2}\d{9}FR$", r"^\d{13,15}$"),
        ),
        CarrierConfig(
            code="mondial_relay",
            name="Mondial Relay",
            aliases=_aliases("mondialrelay", "mondial-relay", "mr"),
            patterns=_patterns(r"^\d{8,12}$"),
        ),
        CarrierConfig(
            code="dpd",
            name="DPD France",
            aliases=_aliases("dpd-france", "dpdfrance"),
            patterns=_patterns(r"^\d{14}$", r"^[A-Z0-9]{14}$"),
        ),
        CarrierConfig(
            code="gls",
            name="GLS France",
            aliases=_aliases("gls-france", "glsfrance"),
            patterns=_patterns(r"^\d{11,12}$"),
        ),
        CarrierConfig(
            code="ups",
            name="UPS",
            patterns=_patterns(r"^1Z[A-Z0-9]{16}$"),
        ),
        CarrierConfig(
            code="fedex",
            name="FedEx",
            patterns=_patterns(r"^\d{12,22}$"),
        ),
        CarrierConfig(
            code="dhl",
            name="DHL",
            aliases=_aliases("dhl-express", "dhlexpress"),
            patterns=_patterns(r"^\d{10,11}$", r"^JD\d{18}$"),
        ),
    )
    registry: Dict[str, CarrierConfig] = {entry.code: entry for entry in entries}
    return MappingProxyType(registry)


CARRIER_REGISTRY: Mapping[str, CarrierConfig] = build_carrier_registry()

# Returned when no registry pattern matches
DEFAULT_CARRIERS: Tuple[str, ...] = ("colissimo", "chronopost", "mondial_relay")


def resolve_carrier(
    carrier: str,
    registry: Mapping[str, CarrierConfig] = CARRIER_REGISTRY
) -> Optional[CarrierConfig]:
    """Find a registry entry by code or alias, None when unknown."""
    if not carrier or not carrier.strip():
        return None
    normalized = normalize_carrier_code(carrier)
    config = registry.get(normalized)
    if config is not None:
        return config
    for entry in registry.values():
        if normalized in entry.aliases:
            return entry
    return None


def get_carrier_name(
    carrier: str,
    registry: Mapping[str, CarrierConfig] = CARRIER_REGISTRY
) -> str:
    """Canonical display name, upper-cased input for unknown carriers."""
    config = resolve_carrier(carrier, registry)
    if config is not None:
        return config.name
    return carrier.strip().upper()
