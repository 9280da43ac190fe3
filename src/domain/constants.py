"""Domain constants for budget planning."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ThresholdTable:
    """Upper bounds (inclusive) of the usage-ratio bands.

    Attributes:
        success_max: Highest ratio still classified as success.
        normal_max: Highest ratio still classified as normal.
        warning_max: Highest ratio still classified as warning; above is danger.
    """

    success_max: float
    normal_max: float
    warning_max: float


# Category-item granularity (cards, grid cells).
ITEM_THRESHOLDS = ThresholdTable(
    success_max=0.60,
    normal_max=0.85,
    warning_max=1.00,
)

# Whole-period granularity (progress widgets).
AGGREGATE_THRESHOLDS = ThresholdTable(
    success_max=0.60,
    normal_max=0.90,
    warning_max=1.00,
)

# Month columns shown by the plan grid.
DEFAULT_GRID_MONTHS = 12

MONTH_ABBREVIATIONS = (
    "jan",
    "feb",
    "mar",
    "apr",
    "may",
    "jun",
    "jul",
    "aug",
    "sep",
    "oct",
    "nov",
    "dec",
)

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


__all__ = [
    "ThresholdTable",
    "ITEM_THRESHOLDS",
    "AGGREGATE_THRESHOLDS",
    "DEFAULT_GRID_MONTHS",
    "MONTH_ABBREVIATIONS",
    "MONTH_NAMES",
]
