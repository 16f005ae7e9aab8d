"""Geospatial helpers: route geometry decoding and map clustering."""

from pyfuel.geo.clustering import (
    Cluster,
    cluster_center,
    cluster_points,
    cluster_radius,
    haversine,
    points_in_bounds,
    should_cluster,
)
from pyfuel.geo.polyline import decode

__all__ = [
    "Cluster",
    "cluster_center",
    "cluster_points",
    "cluster_radius",
    "decode",
    "haversine",
    "points_in_bounds",
    "should_cluster",
]
