"""Aggregator/ranker pipeline: casualty and damage rankings per event type."""

from .pipeline import create_pipeline

__all__ = ["create_pipeline"]
