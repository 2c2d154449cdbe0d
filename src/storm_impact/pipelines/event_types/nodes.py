"""Event-type normalization node for damage-normalized storm records."""

from __future__ import annotations

import logging

import pandas as pd

from .rules import is_official_event_type, normalize_event_type

logger = logging.getLogger(__name__)


def normalize_event_types(
    records: pd.DataFrame,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Add a ``canonical_event_type`` column and an audit of the folding.

    The rules are applied once per distinct raw label and the result is
    mapped back onto every record, which keeps this cheap on the full
    archive (~900K rows, a few hundred distinct labels).

    Args:
        records: Damage-normalized storm records.

    Returns:
        Tuple of (records with canonical_event_type, event type mapping).
        The mapping has one row per (raw label, canonical label) pair with
        its record count and whether the canonical label is official.
    """
    df = records.copy()
    raw_labels = df["event_type"].fillna("").astype(str)

    mapping = {label: normalize_event_type(label) for label in raw_labels.unique()}
    df["canonical_event_type"] = raw_labels.map(mapping)

    blank = df["canonical_event_type"] == ""
    if blank.any():
        logger.warning(
            "%s records have a blank event type and are kept under an "
            "empty category. Sample record ids: %s",
            f"{int(blank.sum()):,}",
            df.loc[blank, "record_id"].head(10).tolist(),
        )

    event_type_mapping = (
        df.assign(raw_event_type=raw_labels)
        .groupby(["raw_event_type", "canonical_event_type"], as_index=False)
        .agg(record_count=("record_id", "count"))
        .sort_values(
            ["record_count", "raw_event_type"],
            ascending=[False, True],
            kind="mergesort",
        )
        .reset_index(drop=True)
    )
    event_type_mapping["is_official"] = (
        event_type_mapping["canonical_event_type"]
        .map(is_official_event_type)
        .astype(bool)
    )

    n_canonical = df["canonical_event_type"].nunique()
    official = df["canonical_event_type"].map(is_official_event_type).astype(bool)
    pct_official = (official.sum() / len(df) * 100) if len(df) > 0 else 0
    logger.info(
        "Event types: %s distinct raw labels folded into %s canonical labels",
        f"{len(mapping):,}",
        f"{n_canonical:,}",
    )
    logger.info(
        "%.1f%% of %s records fall under an official NWS event type",
        pct_official,
        f"{len(df):,}",
    )
    return df, event_type_mapping
