"""Event-type normalization pipeline.

Folds the free-text EVTYPE labels of damage-normalized records into
canonical categories and writes an audit table of every raw → canonical
mapping that occurred.
"""

from kedro.pipeline import Pipeline, node, pipeline

from .nodes import normalize_event_types


def create_pipeline(**kwargs) -> Pipeline:  # noqa: ARG001
    """Create the event_types pipeline."""
    return pipeline(
        [
            node(
                func=normalize_event_types,
                inputs="damage_normalized_records",
                outputs=["normalized_records", "event_type_mapping"],
                name="normalize_event_types",
            ),
        ]
    )
