"""Application settings constants."""

from __future__ import annotations

import os

# Upper bound for a single outbound request, in seconds.
HTTP_TIMEOUT_SECONDS = float(os.environ.get("MIXTAPE_HTTP_TIMEOUT", "15"))

# Embed pages serve stripped markup to non-browser clients.
BROWSER_USER_AGENT = os.environ.get(
    "MIXTAPE_BROWSER_USER_AGENT",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)
BROWSER_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"

ITUNES_SEARCH_URL = "https://itunes.apple.com/search"
SEARCH_RESULT_LIMIT = 20

DEFAULT_APPLE_STOREFRONT = "us"

# Songs shown when previewing an import; the rest are reported as a count.
IMPORT_PREVIEW_LIMIT = 50

# Nesting levels walked when searching serialized page state for songs.
STATE_TREE_MAX_DEPTH = 10

SERVER_HOST = os.environ.get("MIXTAPE_HOST", "127.0.0.1")
SERVER_PORT = int(os.environ.get("MIXTAPE_PORT", "3000"))

# Longest accepted search query and playlist reference, in characters.
MAX_QUERY_LENGTH = 500
MAX_REFERENCE_LENGTH = 2048
