"""Node functions for the impact_ranking pipeline.

Aggregates normalized storm records to one row per canonical event
type and ranks the categories by casualties and by economic damage.
The ranked tables are what the report's two bar charts are drawn from.

Flow:
    normalized_records → category totals → casualty / damage top-N
    normalized_records → mean annual casualties per category
"""

from __future__ import annotations

import logging
from typing import Any

import pandas as pd

from storm_impact.pipelines.event_types.rules import (
    display_event_type,
    is_official_event_type,
)

logger = logging.getLogger(__name__)

CASUALTY_METRIC = "total_casualties"
DAMAGE_METRIC = "total_damage"
DEFAULT_TOP_N = 20

TOTALS_COLUMNS: list[str] = [
    "category",
    "display_name",
    "is_official",
    "event_count",
    "total_fatalities",
    "total_injuries",
    "total_casualties",
    "total_property_damage",
    "total_crop_damage",
    "total_damage",
]

_INT_COLUMNS: list[str] = [
    "event_count",
    "total_fatalities",
    "total_injuries",
    "total_casualties",
]


# ── helpers ─────────────────────────────────────────────────────
def rank_categories(totals: pd.DataFrame, metric: str) -> pd.DataFrame:
    """Order category totals by ``metric`` descending.

    Ties are broken by the canonical category label ascending so the
    order is deterministic. Adds a 1-based ``rank`` column.

    Raises:
        KeyError: if ``metric`` is not a column of ``totals``.
    """
    if metric not in totals.columns:
        raise KeyError(f"Cannot rank by unknown metric: {metric!r}")

    ranking = totals.sort_values(
        [metric, "category"],
        ascending=[False, True],
        kind="mergesort",
    ).reset_index(drop=True)
    ranking.insert(0, "rank", range(1, len(ranking) + 1))
    return ranking


def top_categories(ranking: pd.DataFrame, n: int) -> pd.DataFrame:
    """Return the first ``n`` rows of a ranking, or all of them if fewer."""
    if n < 0:
        raise ValueError(f"top_n must be non-negative, got {n}")
    return ranking.head(n).reset_index(drop=True)


def _top_n(parameters: dict[str, Any]) -> int:
    top_n = parameters.get("top_n")
    return DEFAULT_TOP_N if top_n is None else int(top_n)


# ── Node 1 ──────────────────────────────────────────────────────
def aggregate_category_totals(records: pd.DataFrame) -> pd.DataFrame:
    """Sum casualties and damage per canonical event type.

    Groups on the uppercase canonical label, never the title-cased
    display name, so labels differing only in case cannot split a
    category.

    Args:
        records: Normalized storm records.

    Returns:
        One row per canonical category, columns as in TOTALS_COLUMNS.
        Empty (with the same columns) when there are no records.
    """
    totals = (
        records.groupby("canonical_event_type", as_index=False, sort=True)
        .agg(
            event_count=("record_id", "count"),
            total_fatalities=("fatalities", "sum"),
            total_injuries=("injuries", "sum"),
            total_casualties=("total_casualties", "sum"),
            total_property_damage=("total_property_damage", "sum"),
            total_crop_damage=("total_crop_damage", "sum"),
            total_damage=("total_damage", "sum"),
        )
        .rename(columns={"canonical_event_type": "category"})
    )

    totals["display_name"] = totals["category"].map(display_event_type)
    totals["is_official"] = totals["category"].map(is_official_event_type)
    totals = totals.astype(
        {"is_official": bool, **dict.fromkeys(_INT_COLUMNS, "int64")}
    )
    totals = totals[TOTALS_COLUMNS]

    if totals.empty:
        logger.warning("No records left to aggregate, rankings will be empty")
        return totals

    logger.info(
        "Aggregated %s records into %s categories "
        "(%s casualties, $%s total damage)",
        f"{len(records):,}",
        f"{len(totals):,}",
        f"{totals['total_casualties'].sum():,}",
        f"{totals['total_damage'].sum():,.0f}",
    )
    return totals


# ── Node 2 ──────────────────────────────────────────────────────
def rank_by_casualties(
    category_totals: pd.DataFrame,
    ranking_params: dict[str, Any],
) -> pd.DataFrame:
    """Top-N categories by fatalities + injuries."""
    ranking = top_categories(
        rank_categories(category_totals, CASUALTY_METRIC), _top_n(ranking_params)
    )
    logger.info(
        "Top 5 by casualties: %s",
        ranking["category"].head(5).tolist(),
    )
    return ranking


# ── Node 3 ──────────────────────────────────────────────────────
def rank_by_damage(
    category_totals: pd.DataFrame,
    ranking_params: dict[str, Any],
) -> pd.DataFrame:
    """Top-N categories by property + crop damage in dollars."""
    ranking = top_categories(
        rank_categories(category_totals, DAMAGE_METRIC), _top_n(ranking_params)
    )
    logger.info(
        "Top 5 by damage: %s",
        ranking["category"].head(5).tolist(),
    )
    return ranking


# ── Node 4 ──────────────────────────────────────────────────────
def summarise_annual_casualties(records: pd.DataFrame) -> pd.DataFrame:
    """Average yearly casualties per category over the years it occurred.

    Casualties are first summed per (category, year), then averaged per
    category. A category seen in 3 of 16 years is averaged over 3.

    Args:
        records: Normalized storm records.

    Returns:
        DataFrame with category, display_name, years_active,
        total_casualties and mean_annual_casualties, highest mean first.
    """
    per_year = records.groupby(
        ["canonical_event_type", "year"], as_index=False
    ).agg(total_casualties=("total_casualties", "sum"))

    annual = (
        per_year.groupby("canonical_event_type", as_index=False)
        .agg(
            years_active=("year", "nunique"),
            total_casualties=("total_casualties", "sum"),
            mean_annual_casualties=("total_casualties", "mean"),
        )
        .rename(columns={"canonical_event_type": "category"})
        .sort_values(
            ["mean_annual_casualties", "category"],
            ascending=[False, True],
            kind="mergesort",
        )
        .reset_index(drop=True)
    )
    annual.insert(1, "display_name", annual["category"].map(display_event_type))
    annual = annual.astype(
        {
            "years_active": "int64",
            "total_casualties": "int64",
            "mean_annual_casualties": "float64",
        }
    )

    if not annual.empty:
        logger.info(
            "Mean annual casualties leader: %s (%.1f/yr over %d years)",
            annual["category"].iloc[0],
            annual["mean_annual_casualties"].iloc[0],
            annual["years_active"].iloc[0],
        )
    return annual
