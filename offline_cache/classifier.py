"""
Classification of intercepted fetches. First match wins:
static asset → API call → page navigation → anything else.
"""
from enum import Enum
from urllib.parse import urlsplit

from offline_cache.fetch import FetchRequest

STATIC_EXTENSIONS = (
    ".html", ".css", ".js", ".json", ".ico",
    ".png", ".jpg", ".jpeg", ".gif", ".svg",
    ".woff", ".woff2", ".ttf",
)

# Fonts and libraries served from third-party CDNs
TRUSTED_ASSET_HOSTS = frozenset({
    "fonts.googleapis.com",
    "fonts.gstatic.com",
    "cdnjs.cloudflare.com",
})

API_PREFIXES = ("/ai/", "/api/")
API_EXACT    = ("/health",)

# Only plain web fetches are intercepted
INTERCEPTED_SCHEMES = ("http", "https")


class ResourceKind(str, Enum):
    STATIC     = "static"
    API        = "api"
    NAVIGATION = "navigation"
    OTHER      = "other"


def should_intercept(req: FetchRequest) -> bool:
    return req.method.upper() == "GET" and urlsplit(req.url).scheme in INTERCEPTED_SCHEMES


def is_static_resource(url: str) -> bool:
    parts = urlsplit(url)
    if parts.hostname in TRUSTED_ASSET_HOSTS:
        return True
    path = parts.path or "/"
    return path == "/" or path.lower().endswith(STATIC_EXTENSIONS)


def is_api_request(url: str) -> bool:
    path = urlsplit(url).path
    return path.startswith(API_PREFIXES) or path in API_EXACT


def is_generation_request(url: str) -> bool:
    return urlsplit(url).path.startswith("/ai/")


def is_navigation_request(req: FetchRequest) -> bool:
    if req.mode == "navigate":
        return True
    return req.method.upper() == "GET" and "text/html" in req.header("Accept")


def classify(req: FetchRequest) -> ResourceKind:
    if is_static_resource(req.url):
        return ResourceKind.STATIC
    if is_api_request(req.url):
        return ResourceKind.API
    if is_navigation_request(req):
        return ResourceKind.NAVIGATION
    return ResourceKind.OTHER
