"""
Request/response values seen by the cache router, and the network fetcher
it falls through to.
"""
from dataclasses import dataclass, field

import requests


class NetworkError(Exception):
    """The network could not be reached (DNS, TLS, refused, timeout)."""


@dataclass(frozen=True)
class FetchRequest:
    url:     str
    method:  str = "GET"
    # "navigate" for top-level document loads, as in the Fetch API
    mode:    str = "cors"
    headers: dict = field(default_factory=dict)

    def header(self, name: str, default: str = "") -> str:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default


@dataclass(frozen=True)
class FetchResponse:
    status:  int
    headers: dict = field(default_factory=dict)
    body:    bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class RequestsFetcher:
    """Fetch over the real network with a shared requests.Session."""

    def __init__(self, session: requests.Session | None = None, timeout: float = 30.0):
        self.session = session or requests.Session()
        self.timeout = timeout

    def __call__(self, req: FetchRequest) -> FetchResponse:
        try:
            resp = self.session.request(
                req.method, req.url, headers=req.headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise NetworkError(str(e)) from e
        return FetchResponse(status=resp.status_code, headers=dict(resp.headers), body=resp.content)
