"""Constants describing where metric exports live."""

DEFAULT_BASE_URL = "http://localhost:8080/"

# One CSV export per layout, served from the dashboard's static root.
LAYOUT_FILES = {
    "studio": "Metrics.csv",
    "trainer": "TrainerMetrics.csv",
    "client": "ClientMetrics.csv",
}

DEFAULT_LAYOUT = "studio"

# Spreadsheet exports often start with a byte-order mark; utf-8-sig drops it.
CSV_ENCODING = "utf-8-sig"

REQUEST_HEADERS = {
    "User-Agent": "studio-metrics",
    "Accept": "text/csv,text/plain;q=0.9,*/*;q=0.1",
}
