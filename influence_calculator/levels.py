"""Influence level table derived from the static level dataset."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Sequence

from .config import MAX_LEVEL, MIN_LEVEL, RARITIES
from .errors import DataValidationError, InvalidLevelRange, LevelOutOfBounds


@dataclass(frozen=True, slots=True)
class LevelRecord:
    level: int
    xp_to_next_level: int
    item_xp: Mapping[str, int]

    def gift_xp(self, rarity: str) -> int:
        return int(self.item_xp.get(rarity, 0))


def _parse_record(entry: Mapping) -> LevelRecord:
    try:
        level = int(entry["level"])
        xp_to_next = int(entry["xpToNextLevel"])
        raw_item_xp = entry.get("itemXp", {}) or {}
        item_xp = {rarity: int(raw_item_xp.get(rarity, 0)) for rarity in RARITIES}
    except (KeyError, TypeError, ValueError) as exc:
        raise DataValidationError(f"Malformed level entry: {entry!r}") from exc
    if xp_to_next < 0:
        raise DataValidationError(f"Level {level} has a negative XP requirement")
    return LevelRecord(level=level, xp_to_next_level=xp_to_next, item_xp=item_xp)


class LevelTable:
    """Ordered level records with range validation helpers."""

    def __init__(
        self,
        records: Iterable[LevelRecord],
        min_level: int = MIN_LEVEL,
        max_level: int = MAX_LEVEL,
    ) -> None:
        self.min_level = min_level
        self.max_level = max_level
        self._records: List[LevelRecord] = sorted(records, key=lambda record: record.level)
        expected = list(range(min_level, min_level + len(self._records)))
        if [record.level for record in self._records] != expected:
            raise DataValidationError(f"Levels must be contiguous from {min_level}")
        if len(self._records) < max_level - min_level:
            raise DataValidationError(
                f"Level table covers {len(self._records)} levels; "
                f"need at least {max_level - min_level}"
            )

    @classmethod
    def from_json(cls, data: Mapping | Sequence, **kwargs) -> "LevelTable":
        """Build the table from ``{"levels": [...]}`` or a bare list of entries."""

        entries = data.get("levels", []) if isinstance(data, Mapping) else data
        return cls((_parse_record(entry) for entry in entries), **kwargs)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(self._records)

    def record(self, level: int) -> LevelRecord:
        return self._records[level - self.min_level]

    def validate_range(self, start_level: int, target_level: int) -> None:
        for value in (start_level, target_level):
            if not self.min_level <= value <= self.max_level:
                raise LevelOutOfBounds(
                    f"Levels must be between {self.min_level} and {self.max_level}."
                )
        if start_level >= target_level:
            raise InvalidLevelRange("Starting level must be lower than the target level.")

    def slice(self, start_level: int, target_level: int) -> List[LevelRecord]:
        """Return the records traversed from ``start_level`` up to ``target_level``.

        The range is half-open: the target level's own record is excluded
        because its requirement is for reaching the level after it.
        """

        self.validate_range(start_level, target_level)
        offset = self.min_level
        return self._records[start_level - offset : target_level - offset]

    def total_xp(self, start_level: int, target_level: int) -> int:
        return sum(record.xp_to_next_level for record in self.slice(start_level, target_level))

    def as_dicts(self) -> List[Dict[str, object]]:
        return [
            {
                "level": record.level,
                "xp_to_next_level": record.xp_to_next_level,
                "item_xp": dict(record.item_xp),
            }
            for record in self._records
        ]
