"""Companion and gift records loaded from ``companions.json``.

The bundled ``companions.json`` is placeholder seed data: gift names are
generic and gift images are empty.  Run ``influence-harvest`` to replace it
with the scraped companion list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping

from .config import RARITIES, RARITY_LABELS
from .errors import CompanionNotFound, DataValidationError, UnknownCompanion


@dataclass(frozen=True, slots=True)
class GiftInfo:
    name: str
    type: str
    image_url: str

    def to_json(self) -> Dict[str, str]:
        return {"name": self.name, "type": self.type, "imageUrl": self.image_url}


@dataclass(frozen=True, slots=True)
class Companion:
    id: str
    name: str
    image_url: str
    gifts: Mapping[str, GiftInfo]

    def gift(self, rarity: str) -> GiftInfo:
        return self.gifts[rarity]

    def to_json(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "imageUrl": self.image_url,
            "gifts": {rarity: self.gifts[rarity].to_json() for rarity in RARITIES},
        }


def _parse_gift(rarity: str, raw: Mapping | None) -> GiftInfo:
    raw = raw or {}
    return GiftInfo(
        name=str(raw.get("name") or ""),
        type=str(raw.get("type") or RARITY_LABELS[rarity]),
        image_url=str(raw.get("imageUrl") or ""),
    )


def parse_companion(entry: Mapping) -> Companion:
    if not isinstance(entry, Mapping) or "id" not in entry:
        raise DataValidationError(f"Companion entry without an id: {entry!r}")
    gifts = entry.get("gifts") or {}
    return Companion(
        id=str(entry["id"]),
        name=str(entry.get("name") or ""),
        image_url=str(entry.get("imageUrl") or ""),
        gifts={rarity: _parse_gift(rarity, gifts.get(rarity)) for rarity in RARITIES},
    )


class CompanionRepository:
    """Lookup of companions by id, kept in file order."""

    def __init__(self, companions: Iterable[Companion]) -> None:
        self._by_id: Dict[str, Companion] = {}
        for companion in companions:
            if companion.id in self._by_id:
                raise DataValidationError(f"Duplicate companion id: {companion.id}")
            self._by_id[companion.id] = companion

    @classmethod
    def from_json(cls, data: Mapping) -> "CompanionRepository":
        return cls(parse_companion(entry) for entry in data.get("companions", []) or [])

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, companion_id: object) -> bool:
        return companion_id in self._by_id

    def all(self) -> List[Companion]:
        return list(self._by_id.values())

    def get(self, companion_id: str | None) -> Companion:
        if not companion_id:
            raise UnknownCompanion("Please select a companion before calculating.")
        try:
            return self._by_id[str(companion_id)]
        except KeyError:
            raise CompanionNotFound(f"Unknown companion: {companion_id}") from None
