"""Provider fixtures."""
from dataclasses import dataclass


@dataclass
class Provider:
    id: str
    name: str
    role: str
    specialty: str


PROVIDERS = [
    Provider(
        id="prov-001",
        name="Dr. Sarah Chen",
        role="doctor",
        specialty="General Practice",
    ),
    Provider(
        id="prov-002",
        name="Dr. Michael Rodriguez",
        role="doctor",
        specialty="Physiotherapy",
    ),
    Provider(
        id="prov-003",
        name="Emily Thompson, RN",
        role="nurse",
        specialty="Wound Care",
    ),
]


def get_provider(provider_id: str) -> Provider | None:
    return next((p for p in PROVIDERS if p.id == provider_id), None)


def find_providers_by_role(role: str) -> list[Provider]:
    """Find providers with a given staff role (case-insensitive)."""
    role_lower = role.strip().lower()
    return [p for p in PROVIDERS if p.role == role_lower]
