"""storm_impact: casualty and damage rankings from NOAA Storm Data."""

__version__ = "0.1.0"
