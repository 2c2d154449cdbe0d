"""Raw → normalized-damage pipeline for the NOAA Storm Data archive.

This pipeline projects the raw archive onto storm record columns,
drops malformed, out-of-range and impact-free rows, and converts
magnitude-coded damage into absolute dollars. Unrecognized magnitude
codes are written to a separate anomaly table for auditing.
"""

from kedro.pipeline import Pipeline, node, pipeline

from .nodes import (
    filter_impactful_records,
    normalize_damage_amounts,
    project_storm_records,
)


def create_pipeline(**kwargs) -> Pipeline:  # noqa: ARG001
    """Create the data_processing pipeline.

    Node chain:
        raw archive → project records → filter years/impact
        → normalize damage → damage-normalized records + anomalies
    """
    return pipeline(
        [
            node(
                func=project_storm_records,
                inputs=["storm_data_raw", "params:record_filter"],
                outputs="storm_records",
                name="project_storm_records",
            ),
            node(
                func=filter_impactful_records,
                inputs=["storm_records", "params:record_filter"],
                outputs="impactful_records",
                name="filter_impactful_records",
            ),
            node(
                func=normalize_damage_amounts,
                inputs="impactful_records",
                outputs=["damage_normalized_records", "magnitude_anomalies"],
                name="normalize_damage_amounts",
            ),
        ]
    )
