"""Per-domain sync controllers.

Each controller owns one data domain and publishes a :data:`SyncState`:
remote fetch with retry, cache write on success, cache fallback on failure
and a reload when connectivity comes back.
"""

from pyfuel.sync.controller import DomainSyncController
from pyfuel.sync.listings import ListingsSync
from pyfuel.sync.location import FixedLocationProvider, LocationProvider, LocationSync
from pyfuel.sync.prices import PricesSync
from pyfuel.sync.state import DataOrigin, Failed, Idle, Loading, Ready, SyncState
from pyfuel.sync.trip import TripSync

__all__ = [
    "DataOrigin",
    "DomainSyncController",
    "Failed",
    "FixedLocationProvider",
    "Idle",
    "ListingsSync",
    "Loading",
    "LocationProvider",
    "LocationSync",
    "PricesSync",
    "Ready",
    "SyncState",
    "TripSync",
]
