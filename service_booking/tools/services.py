"""Service catalog and the region/branch directory used on the booking form."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)

SERVICE_CATALOG: dict[str, dict] = {
    "parts-replacement": {
        "name": "Parts Replacement",
        "description": "Replacement of worn or damaged parts with genuine components.",
    },
    "repair-works": {
        "name": "Repair Works",
        "description": "Mechanical and body repairs, including brakes and suspension.",
    },
    "maintenance": {
        "name": "Periodic Maintenance",
        "description": "Scheduled servicing: oil, filters, fluids, and safety inspection.",
    },
    "battery-check": {
        "name": "Battery Check",
        "description": "Battery health test, terminal cleaning, and replacement if needed.",
    },
    "diagnostics": {
        "name": "Diagnosis",
        "description": "Computer diagnostics and fault-code reading.",
    },
}

SERVICE_ALIASES: dict[str, str] = {
    "parts": "parts-replacement", "replacement": "parts-replacement",
    "repair": "repair-works", "brake": "repair-works", "brakes": "repair-works",
    "maintenance": "maintenance", "service": "maintenance", "oil change": "maintenance",
    "oil": "maintenance",
    "battery": "battery-check",
    "diagnosis": "diagnostics", "diagnostic": "diagnostics", "check engine": "diagnostics",
}

REGIONS: dict[str, dict] = {
    "greater-accra": {
        "label": "Greater Accra",
        "branches": {
            "accra-central": "Accra Central",
            "east-legon": "East Legon",
            "spintex": "Spintex",
            "tema": "Tema",
            "madina": "Madina",
        },
    },
    "ashanti": {
        "label": "Ashanti",
        "branches": {
            "kumasi-central": "Kumasi Central",
            "asantemansu": "Asante-Manso",
            "suame": "Suame",
            "tanoso": "Tanoso",
        },
    },
    "eastern": {
        "label": "Eastern",
        "branches": {"koforidua": "Koforidua", "nsawam": "Nsawam", "suhum": "Suhum"},
    },
    "western": {
        "label": "Western",
        "branches": {"takoradi": "Takoradi", "tarkwa": "Tarkwa", "sekondi": "Sekondi"},
    },
    "central": {
        "label": "Central",
        "branches": {"cape-coast": "Cape Coast", "winneba": "Winneba", "elmina": "Elmina"},
    },
    "volta": {
        "label": "Volta",
        "branches": {"ho": "Ho", "hohoe": "Hohoe", "keta": "Keta"},
    },
    "northern": {
        "label": "Northern",
        "branches": {"tamale": "Tamale", "yendi": "Yendi", "savelugu": "Savelugu"},
    },
    "upper-east": {
        "label": "Upper East",
        "branches": {"bolgatanga": "Bolgatanga", "navrongo": "Navrongo"},
    },
    "upper-west": {
        "label": "Upper West",
        "branches": {"wa": "Wa", "tumu": "Tumu"},
    },
    "bono": {
        "label": "Bono",
        "branches": {"sunyani": "Sunyani", "wenchi": "Wenchi"},
    },
    "bono-east": {
        "label": "Bono East",
        "branches": {"techiman": "Techiman", "kintampo": "Kintampo"},
    },
    "ahafo": {
        "label": "Ahafo",
        "branches": {"goaso": "Goaso", "bechem": "Bechem"},
    },
    "savannah": {
        "label": "Savannah",
        "branches": {"damongo": "Damongo", "buipe": "Buipe"},
    },
    "north-east": {
        "label": "North East",
        "branches": {"nalerigu": "Nalerigu", "gambaga": "Gambaga"},
    },
    "oti": {
        "label": "Oti",
        "branches": {"dambai": "Dambai", "jasikan": "Jasikan"},
    },
    "western-north": {
        "label": "Western North",
        "branches": {"sefwi-wiawso": "Sefwi Wiawso", "enchi": "Enchi"},
    },
}


def get_all_services() -> list[dict]:
    """Return all services with basic info."""
    return [{"id": sid, "name": info["name"]} for sid, info in SERVICE_CATALOG.items()]


def get_service_names() -> list[str]:
    """Return the display names customers select on the booking form."""
    return [info["name"] for info in SERVICE_CATALOG.values()]


def get_service_details(service_id: str) -> Optional[dict]:
    """Get full details for a specific service."""
    normalized = service_id.lower().strip()
    info = SERVICE_CATALOG.get(normalized)
    if info is None:
        return None
    return {"id": normalized, **info}


def match_service(query: str) -> Optional[str]:
    """Match free text to a service display name. Returns None if no match."""
    normalized = query.lower().strip()
    if not normalized:
        return None
    for info in SERVICE_CATALOG.values():
        if info["name"].lower() == normalized:
            return info["name"]
    for alias, service_id in SERVICE_ALIASES.items():
        if alias in normalized:
            return SERVICE_CATALOG[service_id]["name"]
    for sid, info in SERVICE_CATALOG.items():
        if sid in normalized or normalized in info["name"].lower():
            return info["name"]
    return None


def get_regions() -> list[dict]:
    """Return regions as value/label pairs for the region picker."""
    return [{"value": value, "label": info["label"]} for value, info in REGIONS.items()]


def get_branches(region: str) -> list[dict]:
    """Return the branches of a region, or an empty list for unknown regions."""
    info = REGIONS.get(region)
    if info is None:
        return []
    return [{"value": value, "label": label} for value, label in info["branches"].items()]


def is_valid_branch(region: str, branch: str) -> bool:
    """Check that a branch belongs to the given region."""
    return any(b["value"] == branch for b in get_branches(region))


def branch_label(branch: str) -> Optional[str]:
    """Look up the display label for a branch value across all regions."""
    for info in REGIONS.values():
        if branch in info["branches"]:
            return info["branches"][branch]
    return None
