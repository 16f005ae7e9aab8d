"""pyfuel - Async Python client for fuel station listings, prices and trip costs."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyfuel")
except PackageNotFoundError:
    __version__ = "0+local"
from pyfuel.cache import CacheDomain, TtlCacheStore
from pyfuel.client import FuelClient
from pyfuel.config import FuelConfig
from pyfuel.connectivity import ConnectivityMonitor, QueueConnectivitySource, Subscription, TransportKind
from pyfuel.exceptions import (
    FuelApiError,
    FuelCacheError,
    FuelConfigError,
    FuelError,
    FuelNetworkError,
    FuelRoutingError,
    FuelTimeoutError,
    LocationError,
    LocationPermissionError,
    LocationServiceError,
    PolylineDecodeError,
)
from pyfuel.models import (
    Bounds,
    FuelType,
    LatLng,
    Review,
    RouteResult,
    Service,
    Station,
    TripCalculation,
    TripRequest,
)
from pyfuel.retry import RetryDecision, RetryPolicy
from pyfuel.storage import JsonFileStore, KeyValueStore, MemoryStore
from pyfuel.sync import (
    DataOrigin,
    Failed,
    Idle,
    ListingsSync,
    Loading,
    LocationProvider,
    LocationSync,
    PricesSync,
    Ready,
    SyncState,
    TripSync,
)

__all__ = [
    "__version__",
    "Bounds",
    "CacheDomain",
    "ConnectivityMonitor",
    "DataOrigin",
    "Failed",
    "FuelApiError",
    "FuelCacheError",
    "FuelClient",
    "FuelConfig",
    "FuelConfigError",
    "FuelError",
    "FuelNetworkError",
    "FuelRoutingError",
    "FuelTimeoutError",
    "FuelType",
    "Idle",
    "JsonFileStore",
    "KeyValueStore",
    "LatLng",
    "ListingsSync",
    "Loading",
    "LocationError",
    "LocationPermissionError",
    "LocationProvider",
    "LocationServiceError",
    "LocationSync",
    "MemoryStore",
    "PolylineDecodeError",
    "PricesSync",
    "QueueConnectivitySource",
    "Ready",
    "RetryDecision",
    "RetryPolicy",
    "Review",
    "RouteResult",
    "Service",
    "Station",
    "Subscription",
    "SyncState",
    "TransportKind",
    "TripCalculation",
    "TripRequest",
    "TripSync",
    "TtlCacheStore",
]
