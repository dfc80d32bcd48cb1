"""
Centralized site configuration.
Edit this file to change the public identity of the worker and the origins
that may call it from a browser.
"""

SITE_CONFIG = {
    # Reported by /health and in 404 bodies
    "service_name": "NexusRank Pro AI Worker",
    "version":      "2.0.0",
    # Fallback Access-Control-Allow-Origin for callers not on the allowlist
    "canonical_origin": "https://nexusrankpro.pages.dev",
    # Exact origins accepted as cross-origin callers
    "allowed_origins": (
        "https://nexusrankpro.pages.dev",
        "http://localhost:5000",
        "http://127.0.0.1:5000",
    ),
    # Preview deployments (<hash>.nexusrankpro.pages.dev) are accepted too
    "trusted_domain": "nexusrankpro.pages.dev",
    # Bump on every deploy so the offline cache drops stale entries
    "cache_version": "v1.0.0",
}
