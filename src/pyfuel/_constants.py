"""Internal constants shared across the library."""

from datetime import timedelta

SUPABASE_REST_PATH = "/rest/v1"
OSRM_BASE_URL = "https://router.project-osrm.org"
OSRM_API_VERSION = "v1"
OSRM_PROFILE = "driving"
USER_AGENT = "pyfuel/aiohttp"

DEFAULT_REQUEST_TIMEOUT: float = 10.0
DEFAULT_ROUTING_TIMEOUT: float = 30.0

# ------------------------------------------------------------------
# Cache lifetimes (bound to the domain, never to the call site)
# ------------------------------------------------------------------

LISTINGS_TTL = timedelta(hours=24)
PRICES_TTL = timedelta(hours=6)
LAST_LOCATION_TTL = timedelta(hours=1)

# ------------------------------------------------------------------
# Retry defaults (seconds)
# ------------------------------------------------------------------

RETRY_MAX_ATTEMPTS = 3
RETRY_INITIAL_DELAY = 1.0
RETRY_MAX_DELAY = 10.0

# ------------------------------------------------------------------
# Geo
# ------------------------------------------------------------------

EARTH_RADIUS_M = 6_371_000.0
POLYLINE6_PRECISION = 1_000_000
CLUSTER_ZOOM_THRESHOLD = 13.0
MIN_POINTS_FOR_CLUSTERING = 10
