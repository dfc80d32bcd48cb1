"""
Origin allowlist for browser callers.

The same header set is used for preflight answers and for every real response,
so the advertised policy and the enforced one cannot drift apart.
"""
from urllib.parse import urlsplit

from site_config import SITE_CONFIG

ALLOW_METHODS = "GET, POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization, Origin"
MAX_AGE       = "86400"


def is_allowed_origin(origin: str | None) -> bool:
    if not origin:
        return False
    if origin in SITE_CONFIG["allowed_origins"]:
        return True
    # The trusted domain itself or any subdomain of it, matched on the hostname
    domain = SITE_CONFIG["trusted_domain"]
    try:
        host = urlsplit(origin).hostname or ""
    except ValueError:
        return False
    return host == domain or host.endswith("." + domain)


def cors_headers(origin: str | None) -> dict[str, str]:
    """Headers granting cross-origin access.

    An unknown origin is never reflected; the canonical origin is sent instead.
    """
    allow_origin = origin if is_allowed_origin(origin) else SITE_CONFIG["canonical_origin"]
    return {
        "Access-Control-Allow-Origin":  allow_origin,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Max-Age":       MAX_AGE,
        "Vary":                         "Origin",
    }
