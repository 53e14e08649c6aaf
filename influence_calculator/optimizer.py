"""Mixed-rarity gift planning against a limited gift inventory."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from .config import RARITIES
from .levels import LevelRecord, LevelTable

COMPLETE = "Complete"
INSUFFICIENT = "Insufficient gifts"


@dataclass(slots=True)
class LevelAllocation:
    level: int
    gifts: Dict[str, int]
    xp_granted: int


@dataclass(slots=True)
class MixedPlan:
    status: str
    start_level: int
    target_level: int
    total_xp_needed: int
    reached_level: int
    gifts: Dict[str, int] = field(default_factory=dict)
    levels: List[LevelAllocation] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.status == COMPLETE

    @property
    def total_gifts(self) -> int:
        return sum(self.gifts.values())

    @property
    def xp_granted(self) -> int:
        return sum(allocation.xp_granted for allocation in self.levels)


def _spend_order(record: LevelRecord) -> List[str]:
    # Highest XP at this level first; tier order breaks ties.
    usable = [rarity for rarity in RARITIES if record.gift_xp(rarity) > 0]
    return sorted(usable, key=lambda rarity: -record.gift_xp(rarity))


def plan_mixed_gifts(
    table: LevelTable,
    start_level: int,
    target_level: int,
    inventory: Optional[Mapping[str, Optional[int]]] = None,
) -> MixedPlan:
    """Spend gifts highest-value first until the target level is reached.

    ``inventory`` optionally caps how many gifts of each rarity may be
    spent; a missing or ``None`` entry means unlimited.  Within a level,
    gifts of the most valuable remaining rarity are handed over until that
    level is crossed or the rarity runs out, then the next rarity takes
    over.  The gift that crosses a level is always the last one given at
    that level, and its excess XP carries into the next level.
    """

    records = table.slice(start_level, target_level)
    remaining: Dict[str, Optional[int]] = {rarity: None for rarity in RARITIES}
    for rarity, limit in (inventory or {}).items():
        if rarity in remaining and limit is not None:
            remaining[rarity] = max(0, int(limit))

    plan = MixedPlan(
        status=COMPLETE,
        start_level=start_level,
        target_level=target_level,
        total_xp_needed=sum(record.xp_to_next_level for record in records),
        reached_level=start_level,
        gifts={rarity: 0 for rarity in RARITIES},
    )

    excess_xp = 0
    for record in records:
        xp_for_level = record.xp_to_next_level - excess_xp
        if xp_for_level <= 0:
            excess_xp = -xp_for_level
            plan.levels.append(LevelAllocation(level=record.level, gifts={}, xp_granted=0))
            plan.reached_level = record.level + 1
            continue

        gifts: Dict[str, int] = {}
        xp_granted = 0
        for rarity in _spend_order(record):
            available = remaining[rarity]
            if available == 0:
                continue
            xp_per_gift = record.gift_xp(rarity)
            count = -(-(xp_for_level - xp_granted) // xp_per_gift)
            if available is not None:
                count = min(count, available)
                remaining[rarity] = available - count
            gifts[rarity] = count
            plan.gifts[rarity] += count
            xp_granted += count * xp_per_gift
            if xp_granted >= xp_for_level:
                break

        plan.levels.append(LevelAllocation(level=record.level, gifts=gifts, xp_granted=xp_granted))
        if xp_granted < xp_for_level:
            plan.status = INSUFFICIENT
            return plan
        excess_xp = xp_granted - xp_for_level
        plan.reached_level = record.level + 1
    return plan
