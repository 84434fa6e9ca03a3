"""
Performance Checks - Plugins, caching, delivery and runtime limits.
"""
import re

from site_inspector.logger import logger
from site_inspector.services.checks.cdn_signatures import detect_cdn
from site_inspector.services.checks.models import AuditContext, AuditResult, Status, make_result
from site_inspector.services.checks.thresholds import (
    MEMORY_THRESHOLDS,
    PLUGIN_THRESHOLDS,
    RUNTIME_THRESHOLDS,
)
from site_inspector.services.environment import effective_memory_limit
from site_inspector.services.probe import ProbeError
from site_inspector.services.sizes import UNLIMITED, format_bytes

TITLE_ACTIVE_PLUGINS = "Active Plugins"
TITLE_PAGE_CACHE = "Page Cache"
TITLE_OBJECT_CACHE = "Object Cache"
TITLE_CDN = "CDN"
TITLE_COMPRESSION = "Compression"
TITLE_PHP_VERSION = "PHP Version"
TITLE_MEMORY_LIMIT = "Memory Limit"
TITLE_DEBUG_MODE = "Debug Mode"

# Plugin directory -> display name
KNOWN_CACHE_PLUGINS = {
    "wp-rocket": "WP Rocket",
    "w3-total-cache": "W3 Total Cache",
    "wp-super-cache": "WP Super Cache",
    "litespeed-cache": "LiteSpeed Cache",
    "wp-fastest-cache": "WP Fastest Cache",
    "cache-enabler": "Cache Enabler",
    "breeze": "Breeze",
    "sg-cachepress": "SiteGround Optimizer",
    "hummingbird-performance": "Hummingbird",
    "comet-cache": "Comet Cache",
}

_VERSION = re.compile(r"^\s*(\d+)\.(\d+)(?:\.(\d+))?")


async def check_active_plugins(ctx: AuditContext) -> AuditResult:
    count = len(ctx.env.active_plugins())
    t = PLUGIN_THRESHOLDS
    explanation = "Every active plugin adds code, queries and assets to each request."

    if count <= t.pass_max:
        status = Status.PASS
        message = f"{count} active plugins."
    elif count <= t.warning_max:
        status = Status.WARNING
        message = f"{count} active plugins. Consider removing ones you no longer use."
    else:
        status = Status.FAIL
        message = f"Too many active plugins ({count})."

    return make_result(
        TITLE_ACTIVE_PLUGINS, status, message, explanation,
        f"Deactivate and delete unused plugins; aim for {t.pass_max} or fewer."
    )


def _active_cache_plugin(plugins) -> str:
    for plugin in plugins:
        directory = plugin.split("/", 1)[0].lower()
        if directory in KNOWN_CACHE_PLUGINS:
            return KNOWN_CACHE_PLUGINS[directory]
    return ""


async def check_page_cache(ctx: AuditContext) -> AuditResult:
    explanation = "Serving cached HTML avoids running PHP and database queries for every visitor."
    cache_flag = ctx.env.config_flag("WP_CACHE")
    plugin = _active_cache_plugin(ctx.env.active_plugins())

    if plugin:
        return make_result(TITLE_PAGE_CACHE, Status.PASS, f"Page caching provided by {plugin}.", explanation)
    if cache_flag:
        return make_result(TITLE_PAGE_CACHE, Status.PASS, "Page caching is enabled (WP_CACHE).", explanation)

    return make_result(
        TITLE_PAGE_CACHE, Status.FAIL, "Page cache is not enabled.", explanation,
        "Install a page caching plugin such as WP Rocket or LiteSpeed Cache."
    )


async def check_object_cache(ctx: AuditContext) -> AuditResult:
    explanation = "A persistent object cache keeps repeated query results in memory between requests."
    backend = ctx.env.object_cache_backend()

    if backend:
        return make_result(TITLE_OBJECT_CACHE, Status.PASS, f"Object cache backend detected: {backend}.", explanation)

    return make_result(
        TITLE_OBJECT_CACHE, Status.WARNING, "No object cache detected.", explanation,
        "Enable Redis or Memcached with an object-cache.php drop-in."
    )


async def check_cdn(ctx: AuditContext) -> AuditResult:
    explanation = "A CDN serves assets from edge locations close to visitors and absorbs traffic spikes."
    site = ctx.env.home_url()

    headers = None
    try:
        response = await ctx.prober.get(site)
        headers = response.headers
    except ProbeError as e:
        logger.info(f"CDN header probe failed, using fallbacks: {e}")

    vendor = await detect_cdn(ctx.prober, site, headers)
    if vendor:
        return make_result(TITLE_CDN, Status.PASS, f"CDN detected: {vendor}.", explanation)

    return make_result(
        TITLE_CDN, Status.WARNING, "No CDN detected.", explanation,
        "Put the site behind a CDN such as Cloudflare."
    )


async def check_compression(ctx: AuditContext) -> AuditResult:
    explanation = "Compressed responses are several times smaller than uncompressed HTML."
    fix = "Enable gzip or Brotli compression in the web server configuration."

    try:
        response = await ctx.prober.get(
            ctx.env.home_url(), headers={"Accept-Encoding": "gzip, deflate"}
        )
    except ProbeError as e:
        return make_result(
            TITLE_COMPRESSION, Status.WARNING,
            f"Unable to verify compression: {e.reason}.", explanation, fix
        )

    encoding = response.header("content-encoding").lower()
    if "gzip" in encoding or "deflate" in encoding:
        return make_result(TITLE_COMPRESSION, Status.PASS, f"Responses are compressed ({encoding}).", explanation)

    return make_result(TITLE_COMPRESSION, Status.FAIL, "Responses are not compressed.", explanation, fix)


def parse_version(raw: str) -> tuple:
    """Leading (major, minor, patch) of a version string such as '8.2.12-1ubuntu'."""
    match = _VERSION.match(raw or "")
    if not match:
        raise ValueError(f"Unrecognised runtime version: {raw!r}")
    return int(match.group(1)), int(match.group(2)), int(match.group(3) or 0)


async def check_php_version(ctx: AuditContext) -> AuditResult:
    raw = ctx.env.runtime_version()
    version = parse_version(raw)
    t = RUNTIME_THRESHOLDS
    explanation = "Newer PHP releases are markedly faster and still receive security fixes."
    recommended = ".".join(str(p) for p in t.recommended)

    if version[:2] >= t.recommended:
        status, message = Status.PASS, f"PHP {raw} is up to date."
    elif version[:2] >= t.minimum:
        status, message = Status.WARNING, f"PHP {raw} works but is no longer the recommended release."
    else:
        status, message = Status.FAIL, f"PHP {raw} is outdated and unsupported."

    return make_result(
        TITLE_PHP_VERSION, status, message, explanation,
        f"Ask your host to upgrade to PHP {recommended} or newer."
    )


async def check_memory_limit(ctx: AuditContext) -> AuditResult:
    limit = effective_memory_limit(ctx.env)
    t = MEMORY_THRESHOLDS
    explanation = "Low memory limits cause white screens and failed updates on busy or plugin-heavy sites."
    fix = f"Raise WP_MEMORY_LIMIT to {format_bytes(t.recommended)} in wp-config.php."
    shown = format_bytes(limit)

    if limit == UNLIMITED or limit >= t.recommended:
        status, message = Status.PASS, f"Memory limit is {shown}."
    elif limit >= t.minimum:
        status, message = Status.WARNING, f"Memory limit is {shown}; {format_bytes(t.recommended)} is recommended."
    else:
        status, message = Status.FAIL, f"Memory limit is only {shown}."

    return make_result(TITLE_MEMORY_LIMIT, status, message, explanation, fix)


async def check_debug_mode(ctx: AuditContext) -> AuditResult:
    explanation = "Debug output slows pages down and can leak file paths and queries to visitors."
    fix = "Set WP_DEBUG to false in production, or at least set WP_DEBUG_DISPLAY to false."

    if not ctx.env.config_flag("WP_DEBUG"):
        return make_result(TITLE_DEBUG_MODE, Status.PASS, "Debug mode is disabled.", explanation)

    # WP_DEBUG_DISPLAY defaults to true when undefined
    if ctx.env.config_flag("WP_DEBUG_DISPLAY", default=True):
        return make_result(
            TITLE_DEBUG_MODE, Status.FAIL,
            "Debug mode is enabled and errors are displayed publicly.", explanation, fix
        )

    return make_result(
        TITLE_DEBUG_MODE, Status.WARNING,
        "Debug mode is enabled but errors are not displayed.", explanation, fix
    )
