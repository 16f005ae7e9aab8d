"""Proximity clustering of map points.

Greedy, single pass and order-sensitive: each point not yet assigned seeds a
cluster and absorbs every later unassigned point within the radius of the
seed.  Membership is decided against the seed only; the mean center is
computed once afterwards and never used to re-check membership.  O(n²).
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from pyfuel._constants import CLUSTER_ZOOM_THRESHOLD, EARTH_RADIUS_M
from pyfuel.models.geo import Bounds, LatLng

P = TypeVar("P")


def haversine(a: LatLng, b: LatLng) -> float:
    """Great-circle distance between *a* and *b* in metres."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    delta_lat = math.radians(b.latitude - a.latitude)
    delta_lng = math.radians(b.longitude - a.longitude)

    h = math.sin(delta_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lng / 2) ** 2
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def cluster_center(points: Sequence[LatLng]) -> LatLng:
    """Arithmetic mean of *points*; ``(0, 0)`` for an empty sequence."""
    if not points:
        return LatLng(latitude=0.0, longitude=0.0)
    return LatLng(
        latitude=sum(p.latitude for p in points) / len(points),
        longitude=sum(p.longitude for p in points) / len(points),
    )


@dataclass(frozen=True)
class Cluster(Generic[P]):
    """A group of nearby points.

    ``members`` starts with ``seed`` and keeps input order.
    """

    seed: P
    members: tuple[P, ...]
    center: LatLng

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def is_single(self) -> bool:
        return len(self.members) == 1


def _position_of(key: Callable[[P], LatLng] | None) -> Callable[[P], LatLng]:
    if key is not None:
        return key
    return lambda point: point  # type: ignore[return-value]


def cluster_points(
    points: Sequence[P],
    radius_m: float,
    *,
    key: Callable[[P], LatLng] | None = None,
) -> list[Cluster[P]]:
    """Partition *points* into clusters of radius *radius_m* around each seed.

    *key* maps an item to its coordinate; omit it when the items are
    :class:`LatLng` themselves.  Every input item lands in exactly one
    cluster, duplicates included.
    """
    position = _position_of(key)
    positions = [position(point) for point in points]
    processed = [False] * len(points)
    clusters: list[Cluster[P]] = []

    for i, seed in enumerate(points):
        if processed[i]:
            continue
        processed[i] = True
        member_indexes = [i]
        for j in range(i + 1, len(points)):
            if processed[j]:
                continue
            if haversine(positions[i], positions[j]) <= radius_m:
                processed[j] = True
                member_indexes.append(j)
        clusters.append(
            Cluster(
                seed=seed,
                members=tuple(points[k] for k in member_indexes),
                center=cluster_center([positions[k] for k in member_indexes]),
            )
        )
    return clusters


def should_cluster(zoom: float) -> bool:
    """Clustering is only used when zoomed out."""
    return zoom < CLUSTER_ZOOM_THRESHOLD


def cluster_radius(zoom: float) -> float:
    """Cluster radius in metres for a map zoom level."""
    if zoom < 10:
        return 5000.0
    if zoom < 12:
        return 2000.0
    if zoom < 13:
        return 1000.0
    return 500.0


def points_in_bounds(
    points: Sequence[P],
    bounds: Bounds,
    *,
    key: Callable[[P], LatLng] | None = None,
) -> list[P]:
    """Items of *points* whose coordinate lies inside *bounds*."""
    position = _position_of(key)
    return [point for point in points if bounds.contains(position(point))]
