"""
Probe - Bounded, read-only HTTP requests against the audited site.

Every probe opens its own client and closes it before returning, so no
connection outlives the check that issued it. Transport faults are mapped to
the ProbeError family; callers decide what an unreachable endpoint means.
"""

import asyncio
import socket
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import urlparse

import httpx

from site_inspector.config import settings as default_settings, Settings
from site_inspector.logger import logger


# Verbs that never mutate remote state for the endpoints we probe
ALLOWED_METHODS = {"GET", "HEAD", "POST"}


class ProbeError(Exception):
    """A probe could not produce a response."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class ProbeTimeout(ProbeError):
    """The target did not answer within the probe timeout."""


class ProbeUnreachable(ProbeError):
    """The connection was refused or the host could not be resolved."""


@dataclass
class ProbeResponse:
    """Observed response of a single probe."""
    url: str
    status_code: int
    headers: httpx.Headers
    text: str = ""

    def header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name, default)


class Prober:
    """Issues HTTP probes with a per-request timeout."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        resolver: Optional[Callable[[str], str]] = None,
    ):
        settings = settings or default_settings
        self.timeout = settings.PROBE_TIMEOUT
        self.user_agent = settings.PROBE_USER_AGENT
        self.transport = transport
        self.resolver = resolver or socket.gethostbyname

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[dict] = None,
        body: Optional[str] = None,
        follow_redirects: bool = True,
    ) -> ProbeResponse:
        """Issue one request and return its status, headers and body.

        Raises:
            ProbeTimeout: the request exceeded the timeout
            ProbeUnreachable: the connection could not be established
            ProbeError: any other transport fault
        """
        method = method.upper()
        if method not in ALLOWED_METHODS:
            raise ValueError(f"Probe method not allowed: {method}")

        request_headers = {"User-Agent": self.user_agent}
        if headers:
            request_headers.update(headers)

        try:
            async with httpx.AsyncClient(
                follow_redirects=follow_redirects,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.request(
                    method, url, headers=request_headers, content=body
                )
                return ProbeResponse(
                    url=str(response.url),
                    status_code=response.status_code,
                    headers=response.headers,
                    text=response.text if method != "HEAD" else "",
                )
        except httpx.TimeoutException as e:
            logger.warning(f"Probe timeout for {method} {url}")
            raise ProbeTimeout(url, "timed out") from e
        except httpx.ConnectError as e:
            logger.warning(f"Probe could not connect to {url}: {e}")
            raise ProbeUnreachable(url, str(e) or "connection failed") from e
        except httpx.HTTPError as e:
            logger.warning(f"Probe error for {method} {url}: {e}")
            raise ProbeError(url, str(e) or type(e).__name__) from e

    async def get(self, url: str, headers: Optional[dict] = None) -> ProbeResponse:
        return await self.request("GET", url, headers=headers)

    async def resolve(self, hostname: str) -> str:
        """Resolve a hostname to an IPv4 address."""
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.resolver, hostname), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            raise ProbeTimeout(hostname, "DNS resolution timed out") from e
        except (socket.gaierror, OSError) as e:
            raise ProbeUnreachable(hostname, f"DNS resolution failed: {e}") from e


def uses_tls(url: str) -> bool:
    """True when the URL is served over HTTPS."""
    return urlparse(url).scheme.lower() == "https"


def join_url(base: str, path: str) -> str:
    """Append a site-relative path to a base URL that may live in a subdirectory."""
    return base.rstrip("/") + "/" + path.lstrip("/")
