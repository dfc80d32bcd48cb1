"""
Offline cache router for the marketing site.

Every page fetch passes through CacheRouter.handle_fetch():
  static assets  : cache-first, copies stored on first successful fetch
  /ai/*          : always live; offline → synthesized 503 JSON
  /health, /status
                 : network-first, last good answer served for up to 5 minutes
  navigations    : network-first; offline → cached page → cached root → offline page
  anything else  : straight to the network

Cache names carry the deploy version so that activate() drops whatever an
older deploy left behind.
"""
import json
import logging
import re
import time
from urllib.parse import urljoin

from offline_cache.classifier import (
    ResourceKind, classify, is_generation_request, should_intercept,
)
from offline_cache.fetch import FetchRequest, FetchResponse, NetworkError
from offline_cache.storage import CacheStorage
from site_config import SITE_CONFIG

logger = logging.getLogger(__name__)

STATIC_CACHE_FILES = (
    "/",
    "/index.html",
    "/css/style.css",
    "/js/app.js",
    "/manifest.json",
    "/sw.js",
    "/favicon.ico",
    "/icons/icon-192x192.png",
    "/icons/icon-512x512.png",
    "/pages/about.html",
    "/pages/contact.html",
    "/pages/privacy.html",
    "/pages/terms.html",
    "/pages/cookie-policy.html",
)

# Non-generation API answers that may be replayed while offline
CACHEABLE_API_PATTERNS = (
    re.compile(r"/health$"),
    re.compile(r"/status$"),
)

API_CACHE_TTL_SECONDS = 5 * 60

OFFLINE_AI_BODY = {
    "success": False,
    "error":   "AI service unavailable. You are offline.",
    "offline": True,
}

OFFLINE_PAGE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>Offline - NexusRank Pro</title>
  <style>
    body { background: #000; color: #fff; text-align: center; padding: 2rem; font-family: sans-serif; }
    h1 { color: #00ffff; }
    .retry-btn { background: #00ffff; color: #000; border: none; padding: 1rem 2rem;
                 border-radius: 8px; font-weight: bold; cursor: pointer; }
  </style>
</head>
<body>
  <h1>You're Offline</h1>
  <p>Some features may not be available without internet.</p>
  <button class="retry-btn" onclick="window.location.reload()">Try Again</button>
</body>
</html>
"""


def cache_names(version: str) -> tuple[str, str]:
    """(static cache, API cache) names for a deploy version."""
    return f"nexusrank-pro-{version}", f"nexusrank-api-{version}"


class CacheRouter:
    def __init__(self, origin: str, fetch, storage: CacheStorage | None = None,
                 version: str = SITE_CONFIG["cache_version"], clock=time.time,
                 api_cache_ttl: float = API_CACHE_TTL_SECONDS):
        """
        Args:
            origin:        Site origin the manifest paths are resolved against.
            fetch:         Callable FetchRequest -> FetchResponse; raises NetworkError.
            storage:       Cache stores; a fresh in-memory one by default.
            version:       Deploy version baked into the cache names.
            clock:         Seconds since epoch, used for API cache freshness.
            api_cache_ttl: How long a cached health/status answer stays usable.
        """
        self.origin        = origin.rstrip("/")
        self.fetch         = fetch
        self._clock        = clock
        self.storage       = storage or CacheStorage(clock=clock)
        self.version       = version
        self.api_cache_ttl = api_cache_ttl
        self.static_cache_name, self.api_cache_name = cache_names(version)
        self.state            = "parsed"
        self.skip_waiting     = False
        self.controls_clients = False

    def _url(self, path: str) -> str:
        return urljoin(self.origin + "/", path)

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def install(self) -> bool:
        """Pre-cache the static manifest. All files are stored or none are."""
        self.state = "installing"
        logger.info("[SW] Installing, caching %d static files", len(STATIC_CACHE_FILES))
        fetched = []
        try:
            for path in STATIC_CACHE_FILES:
                url = self._url(path)
                response = self.fetch(FetchRequest(url))
                if not response.ok:
                    raise NetworkError(f"{url} answered {response.status}")
                fetched.append((url, response))
        except NetworkError as e:
            logger.error("[SW] Failed to cache: %s", e)
            self.state = "installed"
            return False

        cache = self.storage.open(self.static_cache_name)
        for url, response in fetched:
            cache.put(url, response)
        self.state = "installed"
        self.skip_waiting = True
        return True

    def activate(self) -> list[str]:
        """Delete caches left by other versions and take control of clients."""
        self.state = "activating"
        current = {self.static_cache_name, self.api_cache_name}
        stale = [name for name in self.storage.keys() if name not in current]
        for name in stale:
            self.storage.delete(name)
        if stale:
            logger.info("[SW] Deleted stale caches: %s", ", ".join(stale))
        self.state = "activated"
        self.controls_clients = True
        return stale

    def handle_message(self, message: dict):
        """Handle a page → worker message. Returns the reply, if the type has one."""
        kind = (message or {}).get("type")
        if kind == "SKIP_WAITING":
            self.skip_waiting = True
            if self.state == "installed":
                self.activate()
            return None
        if kind == "CLEAR_CACHE":
            names = self.storage.keys()
            for name in names:
                self.storage.delete(name)
            return {"cleared": len(names)}
        if kind == "GET_VERSION":
            return {"version": self.static_cache_name}
        logger.warning("[SW] Ignoring unknown message type: %r", kind)
        return None

    # ── Fetch routing ────────────────────────────────────────────────────────

    def handle_fetch(self, req: FetchRequest) -> FetchResponse | None:
        """Answer an intercepted fetch, or return None to let it pass untouched."""
        if not should_intercept(req):
            return None
        kind = classify(req)
        if kind is ResourceKind.STATIC:
            return self._cache_first(req)
        if kind is ResourceKind.API:
            return self._api_request(req)
        if kind is ResourceKind.NAVIGATION:
            return self._navigation(req)
        return self.fetch(req)

    def _cache_first(self, req: FetchRequest) -> FetchResponse:
        cached = self.storage.match(req.url)
        if cached is not None:
            return cached.response
        try:
            response = self.fetch(req)
        except NetworkError as e:
            logger.error("[SW] Static fetch failed: %s", e)
            raise
        if response.ok:
            self.storage.open(self.static_cache_name).put(req.url, response)
        return response

    def _api_request(self, req: FetchRequest) -> FetchResponse:
        if is_generation_request(req.url):
            try:
                return self.fetch(req)
            except NetworkError:
                return FetchResponse(
                    status=503,
                    headers={"Content-Type": "application/json"},
                    body=json.dumps(OFFLINE_AI_BODY).encode("utf-8"),
                )

        if any(p.search(req.url.split("?", 1)[0]) for p in CACHEABLE_API_PATTERNS):
            try:
                response = self.fetch(req)
            except NetworkError:
                cached = self.storage.open(self.api_cache_name).match(req.url)
                if cached is not None and self._clock() - cached.stored_at < self.api_cache_ttl:
                    return cached.response
                raise
            if response.ok:
                self.storage.open(self.api_cache_name).put(req.url, response)
            return response

        return self.fetch(req)

    def _navigation(self, req: FetchRequest) -> FetchResponse:
        try:
            response = self.fetch(req)
        except NetworkError:
            for url in (req.url, self._url("/index.html"), self._url("/")):
                cached = self.storage.match(url)
                if cached is not None:
                    return cached.response
            return FetchResponse(
                status=200,
                headers={"Content-Type": "text/html; charset=utf-8"},
                body=OFFLINE_PAGE_HTML.encode("utf-8"),
            )
        if response.ok:
            self.storage.open(self.static_cache_name).put(req.url, response)
        return response
