"""Raw → filtered transformation nodes for the NOAA Storm Data archive.

Each function is a Kedro node: pure input → output, no side effects.
Together they project the raw archive onto the storm record fields,
drop malformed and impact-free rows, restrict to the configured year
range, and convert magnitude-coded damage into absolute dollars.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import numpy as np
import pandas as pd

from storm_impact.errors import MalformedRecord, UnrecognizedMagnitudeCode

logger = logging.getLogger(__name__)

# ── Raw archive columns → storm record fields ───────────────────────
RAW_COLUMNS: dict[str, str] = {
    "EVTYPE": "event_type",
    "BGN_DATE": "begin_date",
    "FATALITIES": "fatalities",
    "INJURIES": "injuries",
    "PROPDMG": "property_damage_amount",
    "PROPDMGEXP": "property_damage_magnitude",
    "CROPDMG": "crop_damage_amount",
    "CROPDMGEXP": "crop_damage_magnitude",
}

# e.g. "4/18/1950 0:00:00"
BGN_DATE_FORMAT = "%m/%d/%Y %H:%M:%S"

DEFAULT_MIN_YEAR = 1996

_COUNT_COLUMNS: list[str] = ["fatalities", "injuries"]
_AMOUNT_COLUMNS: list[str] = ["property_damage_amount", "crop_damage_amount"]
_MAGNITUDE_COLUMNS: list[str] = [
    "property_damage_magnitude",
    "crop_damage_magnitude",
]

# (damage_field, amount column, magnitude column, output column)
_DAMAGE_FIELDS: list[tuple[str, str, str, str]] = [
    (
        "property",
        "property_damage_amount",
        "property_damage_magnitude",
        "total_property_damage",
    ),
    ("crop", "crop_damage_amount", "crop_damage_magnitude", "total_crop_damage"),
]

ANOMALY_COLUMNS: list[str] = [
    "record_id",
    "damage_field",
    "raw_code",
    "raw_event_type",
    "fatalities",
    "injuries",
    "damage_amount",
]

# ── Magnitude codes → power-of-ten exponents ────────────────────────
# See section 2.7 "Damage" of the NWS Storm Data documentation.
_MAGNITUDE_EXPONENTS: dict[str, int] = {
    "": 0,
    "K": 3,
    "M": 6,
    "B": 9,
}


# ── Helpers: damage magnitude codes ─────────────────────────────────
def magnitude_exponent(code: object) -> int:
    """Return the power-of-ten exponent for a damage magnitude code.

    Codes are case-insensitive and surrounding whitespace is ignored.
    A missing code (None/NaN) is the same as ``''``.

    Examples:
        "K" → 3
        "m" → 6
        ""  → 0
        "+" → raises UnrecognizedMagnitudeCode

    Raises:
        UnrecognizedMagnitudeCode: for any other code, including the
            digits, "+" and "-" found in the pre-1996 archive.
    """
    if code is None or (not isinstance(code, str) and pd.isna(code)):
        return 0

    text = str(code).strip().upper()
    try:
        return _MAGNITUDE_EXPONENTS[text]
    except KeyError:
        raise UnrecognizedMagnitudeCode(code) from None


def normalize_damage(
    amount: float,
    code: object,
    on_anomaly: Callable[[UnrecognizedMagnitudeCode], None] | None = None,
) -> float:
    """Convert a mantissa + magnitude code to an absolute dollar amount.

    Unrecognized codes are treated as exponent 0 (the amount is kept
    as-is) and reported once through ``on_anomaly``.

    Examples:
        (5, "K")   → 5000.0
        (1.5, "M") → 1500000.0
        (60, "+")  → 60.0, on_anomaly called with the "+" error
    """
    try:
        exponent = magnitude_exponent(code)
    except UnrecognizedMagnitudeCode as exc:
        if on_anomaly is not None:
            on_anomaly(exc)
        exponent = 0
    return float(amount) * 10**exponent


def _exponent_or_none(code: object) -> int | None:
    try:
        return magnitude_exponent(code)
    except UnrecognizedMagnitudeCode:
        return None


# ── Node 1 ───────────────────────────────────────────────────────────
def project_storm_records(
    raw: pd.DataFrame,
    parameters: dict[str, Any],
) -> pd.DataFrame:
    """Project raw archive rows onto typed storm record columns.

    Renames the eight raw columns to snake_case record fields, adds a
    ``record_id`` (the row's position in the archive) so anomalies can
    be traced back, parses ``BGN_DATE`` and extracts ``year``.

    A row is malformed when its date does not parse, when a count or
    amount is non-numeric or negative, or when a count is fractional.
    Malformed rows are dropped and counted per field, unless
    ``parameters["strict"]`` is set, in which case the first one raises.

    Args:
        raw: Raw storm data as loaded from the archive.
        parameters: The ``record_filter`` parameter block.

    Returns:
        DataFrame of well-formed storm records.

    Raises:
        KeyError: if any of the raw columns is missing.
        MalformedRecord: on the first malformed row, in strict mode.
    """
    missing = [c for c in RAW_COLUMNS if c not in raw.columns]
    if missing:
        raise KeyError(f"Expected columns not found in data: {missing}")

    df = raw[list(RAW_COLUMNS)].rename(columns=RAW_COLUMNS)
    df.insert(0, "record_id", np.arange(len(df), dtype="int64"))
    df["event_type"] = df["event_type"].fillna("").astype(str)
    for col in _MAGNITUDE_COLUMNS:
        df[col] = df[col].fillna("").astype(str).str.strip()

    begin_date = pd.to_datetime(
        df["begin_date"], format=BGN_DATE_FORMAT, errors="coerce"
    )
    bad: dict[str, pd.Series] = {"begin_date": begin_date.isna()}
    parsed: dict[str, pd.Series] = {}
    for col in _COUNT_COLUMNS + _AMOUNT_COLUMNS:
        values = pd.to_numeric(df[col], errors="coerce")
        invalid = values.isna() | (values < 0)
        if col in _COUNT_COLUMNS:
            invalid |= values.notna() & (values % 1 != 0)
        bad[col] = invalid
        parsed[col] = values

    bad_frame = pd.DataFrame(bad, index=df.index)
    malformed = bad_frame.any(axis=1)
    n_malformed = int(malformed.sum())

    if n_malformed > 0:
        if parameters.get("strict", False):
            pos = int(np.argmax(malformed.to_numpy()))
            row_bad = bad_frame.iloc[pos]
            field = str(row_bad[row_bad].index[0])
            raise MalformedRecord(
                record_id=int(df["record_id"].iloc[pos]),
                field=field,
                value=df[field].iloc[pos],
            )

        per_field = {
            col: f"{int(n):,}" for col, n in bad_frame.sum().items() if n > 0
        }
        logger.warning(
            "Skipped %s of %s malformed records. By field: %s. "
            "Sample record ids: %s",
            f"{n_malformed:,}",
            f"{len(df):,}",
            per_field,
            df.loc[malformed, "record_id"].head(10).tolist(),
        )

    df["begin_date"] = begin_date
    for col, values in parsed.items():
        df[col] = values

    records = df.loc[~malformed].copy()
    records["year"] = records["begin_date"].dt.year.astype("int64")
    records[_COUNT_COLUMNS] = records[_COUNT_COLUMNS].astype("int64")
    records[_AMOUNT_COLUMNS] = records[_AMOUNT_COLUMNS].astype("float64")

    logger.info(
        "Projected %s storm records from %s raw rows",
        f"{len(records):,}",
        f"{len(raw):,}",
    )
    return records


# ── Node 2 ───────────────────────────────────────────────────────────
def _year_bounds(
    records: pd.DataFrame,
    parameters: dict[str, Any],
) -> tuple[int, int]:
    """Resolve the inclusive year range; ``max_year`` defaults to the data's."""
    min_year = parameters.get("min_year")
    if min_year is None:
        min_year = DEFAULT_MIN_YEAR

    max_year = parameters.get("max_year")
    if max_year is None:
        max_year = int(records["year"].max()) if len(records) else int(min_year)

    if min_year > max_year:
        raise ValueError(
            f"record_filter.min_year ({min_year}) is after max_year ({max_year})"
        )
    return int(min_year), int(max_year)


def filter_impactful_records(
    records: pd.DataFrame,
    parameters: dict[str, Any],
) -> pd.DataFrame:
    """Keep records inside the year range that carry measurable impact.

    Standardised event types were only introduced in 1996, so the
    default lower bound is 1996. A record has no impact when its
    fatalities, injuries, property damage and crop damage are all zero;
    those rows are dropped whatever their event type or year.

    Args:
        records: Storm records from the projection step.
        parameters: The ``record_filter`` parameter block.

    Returns:
        DataFrame with only the in-range, impactful records.
    """
    min_year, max_year = _year_bounds(records, parameters)

    in_range = records["year"].between(min_year, max_year, inclusive="both")
    no_impact = (
        (records["fatalities"] == 0)
        & (records["injuries"] == 0)
        & (records["property_damage_amount"] == 0)
        & (records["crop_damage_amount"] == 0)
    )
    kept = records[in_range & ~no_impact].copy()

    logger.info(
        "Year filter %d to %d: dropped %s out-of-range rows",
        min_year,
        max_year,
        f"{int((~in_range).sum()):,}",
    )
    logger.info(
        "Impact filter: kept %s of %s rows (dropped %s in-range rows with "
        "no casualties or damage)",
        f"{len(kept):,}",
        f"{len(records):,}",
        f"{int((in_range & no_impact).sum()):,}",
    )
    return kept


# ── Node 3 ───────────────────────────────────────────────────────────
def normalize_damage_amounts(
    records: pd.DataFrame,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Convert magnitude-coded damage into absolute dollar amounts.

    Creates:
        - total_property_damage / total_crop_damage: amount × 10^exponent
        - total_damage: property + crop
        - total_casualties: fatalities + injuries

    Magnitude codes outside '', K, M, B are applied as exponent 0 and
    reported in the anomaly table, one row per record and damage field.
    Anomalies carry the raw EVTYPE label (``raw_event_type``): category
    folding runs after this node.

    Args:
        records: Filtered storm records.

    Returns:
        Tuple of (records with dollar columns, magnitude anomalies).
    """
    df = records.copy()
    anomaly_frames: list[pd.DataFrame] = []

    for field, amount_col, magnitude_col, total_col in _DAMAGE_FIELDS:
        exponents = df[magnitude_col].map(_exponent_or_none)
        unrecognized = exponents.isna()

        if unrecognized.any():
            anomalies = df.loc[
                unrecognized,
                [
                    "record_id",
                    magnitude_col,
                    "event_type",
                    "fatalities",
                    "injuries",
                    amount_col,
                ],
            ].rename(
                columns={
                    magnitude_col: "raw_code",
                    amount_col: "damage_amount",
                    "event_type": "raw_event_type",
                }
            )
            anomalies.insert(1, "damage_field", field)
            anomaly_frames.append(anomalies[ANOMALY_COLUMNS])

            logger.warning(
                "%s: %s records have an unrecognized magnitude code, "
                "applied as exponent 0. Codes: %s",
                magnitude_col,
                f"{int(unrecognized.sum()):,}",
                sorted(df.loc[unrecognized, magnitude_col].unique().tolist())[:10],
            )

        exponents = exponents.fillna(0).astype("int64")
        df[total_col] = df[amount_col] * np.power(10.0, exponents)

    df["total_damage"] = df["total_property_damage"] + df["total_crop_damage"]
    df["total_casualties"] = df["fatalities"] + df["injuries"]

    if anomaly_frames:
        anomalies = pd.concat(anomaly_frames, ignore_index=True)
    else:
        anomalies = pd.DataFrame(columns=ANOMALY_COLUMNS)

    logger.info(
        "Damage normalized for %s records: $%s property, $%s crop "
        "(%s magnitude anomalies)",
        f"{len(df):,}",
        f"{df['total_property_damage'].sum():,.0f}",
        f"{df['total_crop_damage'].sum():,.0f}",
        f"{len(anomalies):,}",
    )
    return df, anomalies
