"""FastAPI backend and static front-end for the influence calculator."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field, field_validator

from influence_calculator.calculator import CalculationResult, calculate, xp_text
from influence_calculator.companions import Companion, CompanionRepository
from influence_calculator.config import LEGACY_PERK_NOTICE, RARITIES, RARITY_LABELS
from influence_calculator.data_loader import DataLoader
from influence_calculator.errors import CalculatorError, CompanionNotFound
from influence_calculator.levels import LevelTable
from influence_calculator.optimizer import plan_mixed_gifts

logger = logging.getLogger(__name__)

loader = DataLoader()
levels = LevelTable.from_json(loader.fetch_json("levels"))
companions = CompanionRepository.from_json(loader.fetch_json("companions"))

STATIC_DIR = Path(__file__).resolve().parent / "static"

app = FastAPI(title="Influence Calculator API")
if STATIC_DIR.exists():
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


def _reject(error: CalculatorError) -> HTTPException:
    status_code = 404 if isinstance(error, CompanionNotFound) else 400
    logger.info("Rejected request: %s (%s)", error.title, error)
    return HTTPException(
        status_code=status_code,
        detail={"title": error.title, "description": error.description},
    )


def _gift_rows(companion: Companion, result: CalculationResult) -> List[Dict[str, object]]:
    rows: List[Dict[str, object]] = []
    for rarity in RARITIES:
        outcome = result.rarities[rarity]
        gift = companion.gift(rarity)
        if not outcome.usable or outcome.count == 0 or not gift.name:
            continue
        rows.append(
            {
                "rarity": rarity,
                "label": RARITY_LABELS[rarity],
                "gift": gift.to_json(),
                "count": outcome.count,
                "xp_text": xp_text(outcome.min_xp, outcome.max_xp),
            }
        )
    return rows


class XpRangeModel(BaseModel):
    min: int
    max: int


class RarityModel(BaseModel):
    count: Optional[int]
    usable: bool
    display: str
    xp_range: XpRangeModel


class GiftRowModel(BaseModel):
    rarity: str
    label: str
    gift: Dict[str, str]
    count: int
    xp_text: str


class LevelModel(BaseModel):
    level: int
    xp_to_next_level: int
    item_xp: Dict[str, int]


class InitResponse(BaseModel):
    min_level: int
    max_level: int
    rarities: Dict[str, str]
    notice: str
    levels: List[LevelModel]
    companions: List[Dict[str, object]]


class CalculateRequest(BaseModel):
    companion_id: Optional[str] = None
    start_level: int
    target_level: int

    @field_validator("companion_id", mode="before")
    def _convert_companion_id(cls, value):
        if value is None or value == "":
            return None
        return str(value)


class CalculateResponse(BaseModel):
    companion: Dict[str, object]
    start_level: int
    target_level: int
    total_xp_needed: int
    rarities: Dict[str, RarityModel]
    gifts: List[GiftRowModel]


class PlanRequest(CalculateRequest):
    inventory: Dict[str, Optional[int]] = Field(default_factory=dict)

    @field_validator("inventory", mode="before")
    def _known_rarities(cls, value):
        if isinstance(value, dict):
            return {
                str(key).lower(): (None if limit is None else max(0, int(limit)))
                for key, limit in value.items()
                if str(key).lower() in RARITIES
            }
        return value


class LevelAllocationModel(BaseModel):
    level: int
    gifts: Dict[str, int]
    xp_granted: int


class PlanResponse(BaseModel):
    status: str
    companion: Dict[str, object]
    start_level: int
    target_level: int
    total_xp_needed: int
    reached_level: int
    total_gifts: int
    xp_granted: int
    gifts: Dict[str, int]
    levels: List[LevelAllocationModel]
    message: str | None = None


@app.get("/", include_in_schema=False)
async def root() -> FileResponse:
    index_path = STATIC_DIR / "index.html"
    if not index_path.exists():
        raise HTTPException(status_code=404, detail="Front-end not built yet")
    return FileResponse(index_path)


@app.get("/api/init", response_model=InitResponse)
async def api_init() -> InitResponse:
    return InitResponse(
        min_level=levels.min_level,
        max_level=levels.max_level,
        rarities=RARITY_LABELS,
        notice=LEGACY_PERK_NOTICE,
        levels=[LevelModel(**record) for record in levels.as_dicts()],
        companions=[companion.to_json() for companion in companions.all()],
    )


@app.post("/api/calculate", response_model=CalculateResponse)
async def api_calculate(payload: CalculateRequest) -> CalculateResponse:
    try:
        companion = companions.get(payload.companion_id)
        result = calculate(levels, payload.start_level, payload.target_level)
    except CalculatorError as error:
        raise _reject(error) from None

    rarities = {
        rarity: RarityModel(
            count=outcome.count,
            usable=outcome.usable,
            display=outcome.display,
            xp_range=XpRangeModel(min=outcome.min_xp, max=outcome.max_xp),
        )
        for rarity, outcome in result.rarities.items()
    }
    return CalculateResponse(
        companion=companion.to_json(),
        start_level=result.start_level,
        target_level=result.target_level,
        total_xp_needed=result.total_xp_needed,
        rarities=rarities,
        gifts=[GiftRowModel(**row) for row in _gift_rows(companion, result)],
    )


@app.post("/api/plan", response_model=PlanResponse)
async def api_plan(payload: PlanRequest) -> PlanResponse:
    try:
        companion = companions.get(payload.companion_id)
        plan = plan_mixed_gifts(levels, payload.start_level, payload.target_level, payload.inventory)
    except CalculatorError as error:
        raise _reject(error) from None

    message: str | None = None
    if not plan.complete:
        message = f"Your gift inventory only reaches level {plan.reached_level}."

    return PlanResponse(
        status=plan.status,
        companion=companion.to_json(),
        start_level=plan.start_level,
        target_level=plan.target_level,
        total_xp_needed=plan.total_xp_needed,
        reached_level=plan.reached_level,
        total_gifts=plan.total_gifts,
        xp_granted=plan.xp_granted,
        gifts=plan.gifts,
        levels=[
            LevelAllocationModel(level=item.level, gifts=item.gifts, xp_granted=item.xp_granted)
            for item in plan.levels
        ],
        message=message,
    )
