"""Configuration for the influence calculator data sources."""

from __future__ import annotations

import os
from pathlib import Path

MIN_LEVEL = 1
MAX_LEVEL = 50

ARTIFACT = "artifact"
PROTOTYPE = "prototype"
PREMIUM = "premium"
RARITIES = (ARTIFACT, PROTOTYPE, PREMIUM)
"""Gift rarity tiers, highest influence value first."""

RARITY_LABELS = {
    ARTIFACT: "Artifact",
    PROTOTYPE: "Prototype",
    PREMIUM: "Premium",
}

DATA_DIR = Path(os.environ.get("INFLUENCE_DATA_DIR", Path(__file__).resolve().parent / "data"))

DATA_FILES = {
    "companions": "companions.json",
    "levels": "influence_levels.json",
}
"""Mapping of dataset name to the file (or URL) it is read from."""

COMPANIONS_URL = "https://swtorista.com/companions"
FLEET_VENDOR = "Fleet Companion Gifts Vendor"
REQUEST_TIMEOUT = 30
HARVEST_DELAY = 0.5

LEGACY_PERK_NOTICE = (
    "Calculations require Legacy of Altruism III for accuracy (+30% influence)."
)
