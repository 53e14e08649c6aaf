"""Gift allocation for crossing a range of influence levels."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from .config import RARITIES
from .levels import LevelRecord, LevelTable


@dataclass(frozen=True, slots=True)
class RarityResult:
    rarity: str
    count: Optional[int]
    min_xp: int
    max_xp: int

    @property
    def usable(self) -> bool:
        return self.count is not None

    @property
    def display(self) -> str:
        return "\u221e" if self.count is None else f"{self.count:,}"


@dataclass(frozen=True, slots=True)
class CalculationResult:
    start_level: int
    target_level: int
    total_xp_needed: int
    rarities: Dict[str, RarityResult]

    def count(self, rarity: str) -> Optional[int]:
        return self.rarities[rarity].count


def gifts_for_rarity(records: Sequence[LevelRecord], rarity: str) -> Optional[int]:
    """Count gifts of one rarity needed to cross ``records`` in order.

    Excess XP from the last gift of a level carries into the next level.
    Returns ``None`` when a level that still needs XP grants nothing for
    this rarity, since no number of gifts could cover it.
    """

    gift_count = 0
    excess_xp = 0
    for record in records:
        xp_for_level = record.xp_to_next_level - excess_xp
        if xp_for_level <= 0:
            excess_xp = -xp_for_level
            continue
        xp_per_gift = record.gift_xp(rarity)
        if xp_per_gift <= 0:
            return None
        gifts_needed = -(-xp_for_level // xp_per_gift)
        gift_count += gifts_needed
        excess_xp = gifts_needed * xp_per_gift - xp_for_level
    return gift_count


def xp_range(records: Sequence[LevelRecord], rarity: str) -> tuple[int, int]:
    values = [record.gift_xp(rarity) for record in records]
    if not values:
        return 0, 0
    return min(values), max(values)


def calculate(table: LevelTable, start_level: int, target_level: int) -> CalculationResult:
    """Compute per-rarity gift counts from ``start_level`` to ``target_level``.

    Raises ``LevelOutOfBounds`` or ``InvalidLevelRange`` before any
    computation when the range is rejected.
    """

    records = table.slice(start_level, target_level)
    total_xp_needed = sum(record.xp_to_next_level for record in records)
    rarities: Dict[str, RarityResult] = {}
    for rarity in RARITIES:
        low, high = xp_range(records, rarity)
        rarities[rarity] = RarityResult(
            rarity=rarity,
            count=gifts_for_rarity(records, rarity),
            min_xp=low,
            max_xp=high,
        )
    return CalculationResult(
        start_level=start_level,
        target_level=target_level,
        total_xp_needed=total_xp_needed,
        rarities=rarities,
    )


def xp_text(min_xp: int, max_xp: int) -> str:
    """Format the per-gift XP range shown next to a gift."""

    if min_xp == max_xp:
        return f"{min_xp:,} XP each"
    return f"{min_xp:,} - {max_xp:,} XP each"
