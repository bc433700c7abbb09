"""Application constants."""

USER_AGENT = "charging-snapshot/0.1 (+https://github.com/ev-map/charging-snapshot)"

OVERPASS_ENDPOINTS = {
    "switzerland": "https://overpass.osm.ch/api/interpreter",
    "world": "https://overpass-api.de/api/interpreter",
}
DEFAULT_ENDPOINT = "switzerland"
DEFAULT_TIMEOUT_SECONDS = 900
# Headroom so the transport never cuts off a response the server may still send.
TIMEOUT_BUFFER_SECONDS = 30
DEFAULT_OUTFILE_RAW = "overpass-result.json"
DEFAULT_OUTFILE_COMPRESSED = "charging-stations-osm.json.gz"

GZIP_COMPRESSLEVEL = 9
SNAPSHOT_JSON_INDENT = 1
DOWNLOAD_CHUNK_SIZE = 1024 * 128

EXIT_SUCCESS = 0
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "event",
    "status",
    "duration_ms",
    "rows_in",
    "rows_out",
    "bytes",
    "error_code",
    "message",
)
