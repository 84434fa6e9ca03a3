"""
CDN Signatures - Ordered detection table for edge networks.

Precedence: dedicated vendor headers, then generic headers, then the
resolved IP range, then hostname heuristics. The first match wins.
"""
import ipaddress
from typing import Optional
from urllib.parse import urlparse

import httpx

from site_inspector.logger import logger
from site_inspector.services.probe import ProbeError, Prober


# (header, vendor) - presence of the header identifies the vendor
DEDICATED_HEADERS = [
    ("cf-ray", "Cloudflare"),
    ("x-amz-cf-id", "Amazon CloudFront"),
    ("x-fastly-request-id", "Fastly"),
    ("x-akamai-transformed", "Akamai"),
    ("akamai-grn", "Akamai"),
    ("x-sucuri-id", "Sucuri"),
    ("x-bunnycdn-request-id", "BunnyCDN"),
    ("cdn-pullzone", "BunnyCDN"),
    ("x-kinsta-cache", "Kinsta CDN"),
]

# (header, substring, vendor) - header value must contain the substring
GENERIC_HEADERS = [
    ("server", "cloudflare", "Cloudflare"),
    ("server", "akamaighost", "Akamai"),
    ("via", "cloudfront", "Amazon CloudFront"),
    ("via", "fastly", "Fastly"),
    ("via", "varnish", "Varnish"),
]

# Published Cloudflare IPv4 ranges
CLOUDFLARE_RANGES = [
    ipaddress.ip_network(cidr) for cidr in (
        "173.245.48.0/20", "103.21.244.0/22", "103.22.200.0/22",
        "103.31.4.0/22", "141.101.64.0/18", "108.162.192.0/18",
        "190.93.240.0/20", "188.114.96.0/20", "197.234.240.0/22",
        "198.41.128.0/17", "162.158.0.0/15", "104.16.0.0/13",
        "104.24.0.0/14", "172.64.0.0/13", "131.0.72.0/22",
    )
]

# (hostname substring, vendor)
HOSTNAME_HINTS = [
    ("cloudfront.net", "Amazon CloudFront"),
    ("b-cdn.net", "BunnyCDN"),
    ("stackpathcdn.com", "StackPath"),
    ("azureedge.net", "Azure CDN"),
]


def match_headers(headers: Optional[httpx.Headers]) -> Optional[str]:
    """Vendor named by response headers, if any."""
    if not headers:
        return None

    for header, vendor in DEDICATED_HEADERS:
        if header in headers:
            return vendor

    for header, needle, vendor in GENERIC_HEADERS:
        if needle in headers.get(header, "").lower():
            return vendor

    # x-cdn carries the vendor name itself
    x_cdn = headers.get("x-cdn", "").strip()
    if x_cdn:
        return x_cdn

    return None


def match_ip(address: str) -> Optional[str]:
    try:
        ip = ipaddress.ip_address(address)
    except ValueError:
        return None
    if any(ip in network for network in CLOUDFLARE_RANGES):
        return "Cloudflare"
    return None


def match_hostname(hostname: str) -> Optional[str]:
    hostname = hostname.lower()
    for needle, vendor in HOSTNAME_HINTS:
        if needle in hostname:
            return vendor
    if hostname.startswith("cdn."):
        return "CDN subdomain"
    return None


async def detect_cdn(prober: Prober, site_url: str, headers: Optional[httpx.Headers]) -> Optional[str]:
    """Walk the signature table in priority order."""
    vendor = match_headers(headers)
    if vendor:
        return vendor

    hostname = urlparse(site_url).hostname or ""
    if not hostname:
        return None

    try:
        vendor = match_ip(await prober.resolve(hostname))
    except ProbeError as e:
        logger.info(f"Skipping CDN IP lookup: {e}")
        vendor = None
    if vendor:
        return vendor

    return match_hostname(hostname)
