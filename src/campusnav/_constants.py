"""Internal constants shared across the library."""

USER_AGENT = "campusnav/0 (+aiohttp)"

# ------------------------------------------------------------------
# Routing
# ------------------------------------------------------------------

OSRM_BASE_URL = "https://router.project-osrm.org"
OSRM_WALKING_PROFILE = "foot"
OSRM_OK_CODE = "Ok"
ROUTING_TIMEOUT_S = 8.0

#: Degrees within which a route endpoint counts as the origin/destination.
COORDINATE_TOLERANCE = 1e-5

# ------------------------------------------------------------------
# Map view (Muthoot Institute of Technology & Science main building)
# ------------------------------------------------------------------

DEFAULT_CENTER_LATITUDE = 9.964102
DEFAULT_CENTER_LONGITUDE = 76.408134
DEFAULT_ZOOM = 16
FOUND_ZOOM = 17

# ------------------------------------------------------------------
# Entity store (PostgREST / Supabase)
# ------------------------------------------------------------------

ENTITY_TABLE = "rooms"
ENTITY_SELECT = (
    "id:room_id,name:room_name,number:room_number,"
    "floor:floor_id(name:floor_name,building:building_id(name:building_name,latitude,longitude))"
)
ENTITY_ORDER = "building_id.asc,floor_id.asc,room_number.asc"
