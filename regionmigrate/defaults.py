# Layout names shared by the old and new on-disk formats.
OLD_PREFIX = "hregion_"
LOG_PREFIX = "log_"

ROOT_TABLE_NAME = "-ROOT-"
META_TABLE_NAME = ".META."
ROOT_REGION_ENCODED_NAME = "70236052"

MAPFILES_DIR = "mapfiles"
REFERENCE_SEPARATOR = "."

VERSION_FILE_NAME = "hbase.version"
FILE_SYSTEM_VERSION = "0.1"

# Rows of a catalog region, stored at the top of its directory.
CATALOG_ROWS_FILE = "rows.json"

DEFAULT_SERVICE_URL = "http://localhost:60010/"
DEFAULT_PROBE_TIMEOUT = 2.0
