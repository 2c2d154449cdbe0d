"""Impact ranking pipeline: normalized records → ranked category tables.

Node dependency graph:
    normalized_records → [aggregate_category_totals] → category_totals
    category_totals → [rank_by_casualties] → casualty_ranking
    category_totals → [rank_by_damage]     → damage_ranking
    normalized_records → [summarise_annual_casualties] → annual_casualties

The two ranking nodes are independent of each other.
"""

from kedro.pipeline import Pipeline, node, pipeline

from .nodes import (
    aggregate_category_totals,
    rank_by_casualties,
    rank_by_damage,
    summarise_annual_casualties,
)


def create_pipeline(**kwargs) -> Pipeline:  # noqa: ARG001
    """Create the impact_ranking pipeline."""
    return pipeline(
        [
            node(
                func=aggregate_category_totals,
                inputs="normalized_records",
                outputs="category_totals",
                name="aggregate_category_totals",
            ),
            node(
                func=rank_by_casualties,
                inputs=["category_totals", "params:impact_ranking"],
                outputs="casualty_ranking",
                name="rank_by_casualties",
            ),
            node(
                func=rank_by_damage,
                inputs=["category_totals", "params:impact_ranking"],
                outputs="damage_ranking",
                name="rank_by_damage",
            ),
            node(
                func=summarise_annual_casualties,
                inputs="normalized_records",
                outputs="annual_casualties",
                name="summarise_annual_casualties",
            ),
        ]
    )
