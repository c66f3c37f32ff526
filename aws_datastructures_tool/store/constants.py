"""
Constants for data-structure store operations.
"""

# Default table layout
DEFAULT_TABLE_NAME = "aws-datastructures-tool"
DEFAULT_INDEX_NAME = "idx"

# DynamoDB attribute names
ATTR_PK = "pk"
ATTR_SK = "sk"
ATTR_SCORE = "skN"  # numeric secondary sort key, range key of the LSI
ATTR_VALUE = "val"
ATTR_VALUE_TYPE = "vt"

# Reserved partition-key namespace for auxiliary items (list index counters).
# User keys must never start with this prefix.
RESERVED_NAMESPACE = "_ds/"

# Fields of the list counter item
LIST_INDEX_LEFT = "index_left"
LIST_INDEX_RIGHT = "index_right"

# List member sort-key encoding
LIST_SK_VERSION = "1"
LIST_SK_SEPARATOR = "|"

# DynamoDB limits
MAX_TRANSACTION_ITEMS = 100
MAX_KEY_LENGTH = 1024

# Geo
EARTH_RADIUS_METERS = 6372797.560856
GEO_STEP_MAX = 26  # bits per axis at maximum resolution (52-bit cell ids)
GEOHASH_LENGTH = 11
