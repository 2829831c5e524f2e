"""Runtime settings read from the environment (or a ``.env`` file).

Every value has a default so the engine starts without configuration;
override through environment variables of the same name.
"""

from decouple import config

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = config("LOG_LEVEL", default="INFO")

LOG_JSON = config("LOG_JSON", default=True, cast=bool)

# ---------------------------------------------------------------------------
# Inventory defaults (applied when a product is registered without explicit
# threshold/capacity)
# ---------------------------------------------------------------------------
INVENTORY_DEFAULT_MIN_THRESHOLD = config(
    "INVENTORY_DEFAULT_MIN_THRESHOLD", default=10, cast=int
)

INVENTORY_DEFAULT_MAX_CAPACITY = config(
    "INVENTORY_DEFAULT_MAX_CAPACITY", default=1000, cast=int
)

# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------
HOT_PRODUCTS_DEFAULT_LIMIT = config("HOT_PRODUCTS_DEFAULT_LIMIT", default=10, cast=int)
