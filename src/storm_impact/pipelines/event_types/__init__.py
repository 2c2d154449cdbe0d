"""Category normalizer pipeline: canonical event types for storm records."""

from .pipeline import create_pipeline

__all__ = ["create_pipeline"]
