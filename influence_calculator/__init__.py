"""Companion influence gift calculator."""

from .calculator import CalculationResult, calculate
from .config import MAX_LEVEL, MIN_LEVEL, RARITIES
from .data_loader import DataLoader

__all__ = ["CalculationResult", "DataLoader", "MAX_LEVEL", "MIN_LEVEL", "RARITIES", "calculate"]
