"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_STORE_KEY = "sms_store_v2_fresh"
DEFAULT_STORE_FILENAME = "school_store.json"
