"""
Security Checks - Exposure of users, endpoints, versions and defaults.
"""
import json
import re
from typing import List

from bs4 import BeautifulSoup

from site_inspector.logger import logger
from site_inspector.services.checks.models import AuditContext, AuditResult, Status, make_result
from site_inspector.services.checks.thresholds import SECURITY_DEFAULTS
from site_inspector.services.probe import ProbeError, ProbeUnreachable, join_url, uses_tls

TITLE_REST_USERS = "REST API User Enumeration"
TITLE_XMLRPC = "XML-RPC"
TITLE_REGISTRATION = "User Registration"
TITLE_VERSION_DISCLOSURE = "Version Disclosure"
TITLE_HTTPS = "HTTPS"
TITLE_FILE_EDITING = "File Editing"
TITLE_DB_PREFIX = "Database Prefix"
TITLE_ADMIN_USERNAME = "Default Admin Username"

IDENTIFYING_FIELDS = ("id", "slug", "name")

LIST_METHODS_CALL = (
    '<?xml version="1.0"?>'
    "<methodCall><methodName>system.listMethods</methodName><params></params></methodCall>"
)

# Files shipped with the core that state its version
VERSION_FILES = ("readme.html", "changelog.txt")
_FILE_VERSION = re.compile(r"Version\s*\d+(?:\.\d+)+", re.IGNORECASE)
_CORE_ASSET_VERSION = re.compile(r"/wp-includes/.+[?&]ver=\d+(?:\.\d+)+")

_TRUTHY = {"1", "true", "yes", "on"}


def _truthy(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


async def check_rest_user_enumeration(ctx: AuditContext) -> AuditResult:
    explanation = "A public users endpoint hands attackers valid login names for brute force attempts."
    fix = "Restrict the /wp/v2/users REST route to authenticated requests."
    url = join_url(ctx.env.home_url(), "wp-json/wp/v2/users")

    try:
        response = await ctx.prober.get(url)
    except ProbeError as e:
        return make_result(
            TITLE_REST_USERS, Status.WARNING,
            f"Unable to verify the REST users endpoint: {e.reason}.", explanation, fix
        )

    exposed: List[dict] = []
    if response.status_code == 200:
        try:
            payload = json.loads(response.text)
        except ValueError:
            payload = None
        if isinstance(payload, list):
            exposed = [
                item for item in payload
                if isinstance(item, dict) and any(k in item for k in IDENTIFYING_FIELDS)
            ]

    if exposed:
        slugs = [str(item.get("slug") or item.get("name") or item.get("id")) for item in exposed]
        return make_result(
            TITLE_REST_USERS, Status.FAIL,
            f"REST API exposes {len(exposed)} user(s): {', '.join(slugs[:5])}.", explanation, fix
        )

    return make_result(
        TITLE_REST_USERS, Status.PASS,
        f"REST users endpoint does not expose user data (HTTP {response.status_code}).", explanation
    )


async def check_xmlrpc(ctx: AuditContext) -> AuditResult:
    explanation = "XML-RPC allows many password guesses per request and is a common DDoS amplification vector."
    fix = "Block xmlrpc.php at the web server or disable it with a security plugin."
    url = join_url(ctx.env.site_url(), "xmlrpc.php")

    try:
        response = await ctx.prober.request(
            "POST", url, headers={"Content-Type": "text/xml"}, body=LIST_METHODS_CALL
        )
    except ProbeUnreachable:
        return make_result(TITLE_XMLRPC, Status.PASS, "XML-RPC endpoint refuses connections.", explanation)
    except ProbeError as e:
        return make_result(
            TITLE_XMLRPC, Status.WARNING, f"Unable to verify XML-RPC: {e.reason}.", explanation, fix
        )

    if response.status_code in SECURITY_DEFAULTS.xmlrpc_blocked_statuses:
        return make_result(
            TITLE_XMLRPC, Status.PASS,
            f"XML-RPC is blocked (HTTP {response.status_code}).", explanation
        )

    if response.status_code == 200:
        soup = BeautifulSoup(response.text, "html.parser")
        if soup.find("methodresponse"):
            if soup.find("fault"):
                return make_result(
                    TITLE_XMLRPC, Status.PASS, "XML-RPC answers with a fault; methods are disabled.", explanation
                )
            methods = [s.get_text(strip=True) for s in soup.find_all("string")]
            if methods:
                return make_result(
                    TITLE_XMLRPC, Status.FAIL,
                    f"XML-RPC is enabled and lists {len(methods)} methods.", explanation, fix
                )

    return make_result(
        TITLE_XMLRPC, Status.WARNING,
        f"XML-RPC returned an unexpected response (HTTP {response.status_code}).", explanation, fix
    )


async def check_registration(ctx: AuditContext) -> AuditResult:
    explanation = "Open registration lets anyone create an account on the site."
    fix = "Disable 'Anyone can register' under Settings > General unless you need it."

    if not _truthy(ctx.env.option("users_can_register", False)):
        return make_result(TITLE_REGISTRATION, Status.PASS, "User registration is disabled.", explanation)

    role = str(ctx.env.option("default_role") or SECURITY_DEFAULTS.lowest_role)
    if role == SECURITY_DEFAULTS.lowest_role:
        return make_result(
            TITLE_REGISTRATION, Status.WARNING,
            f"User registration is enabled with the default role '{role}'.", explanation, fix
        )

    return make_result(
        TITLE_REGISTRATION, Status.FAIL,
        f"User registration is enabled and new users get the '{role}' role.", explanation,
        f"Set the default role to '{SECURITY_DEFAULTS.lowest_role}' or disable registration."
    )


def _asset_exposes_version(src: str, core_version) -> bool:
    if core_version:
        return bool(re.search(rf"[?&]ver={re.escape(core_version)}(?:&|$)", src))
    return bool(_CORE_ASSET_VERSION.search(src))


async def check_version_disclosure(ctx: AuditContext) -> AuditResult:
    explanation = "A visible core version lets attackers match the site against known vulnerabilities."
    fix = "Remove the generator tag, strip ver= query strings from core assets and delete readme.html."
    home = ctx.env.home_url()

    try:
        response = await ctx.prober.get(home)
    except ProbeError as e:
        return make_result(
            TITLE_VERSION_DISCLOSURE, Status.WARNING,
            f"Unable to verify version disclosure: {e.reason}.", explanation, fix
        )

    evidence = []
    soup = BeautifulSoup(response.text, "html.parser")

    generator = soup.find("meta", attrs={"name": re.compile(r"^generator$", re.IGNORECASE)})
    if generator and "wordpress" in (generator.get("content") or "").lower():
        evidence.append(f"generator tag ({generator.get('content')})")

    core_version = ctx.env.core_version()
    for tag in soup.find_all(["script", "link"]):
        src = tag.get("src") or tag.get("href") or ""
        if _asset_exposes_version(src, core_version):
            evidence.append("asset version strings")
            break

    for path in VERSION_FILES:
        try:
            file_response = await ctx.prober.get(join_url(ctx.env.site_url(), path))
        except ProbeError as e:
            logger.info(f"Version file probe skipped for {path}: {e}")
            continue
        if file_response.status_code == 200 and _FILE_VERSION.search(file_response.text):
            evidence.append(path)

    if evidence:
        return make_result(
            TITLE_VERSION_DISCLOSURE, Status.FAIL,
            f"Version exposed via {', '.join(evidence)}.", explanation, fix
        )

    return make_result(TITLE_VERSION_DISCLOSURE, Status.PASS, "No version disclosure detected.", explanation)


async def check_https(ctx: AuditContext) -> AuditResult:
    explanation = "HTTPS protects logins and cookies in transit and is required by modern browsers."
    site, home = ctx.env.site_url(), ctx.env.home_url()

    if not ctx.env.is_ssl():
        return make_result(
            TITLE_HTTPS, Status.FAIL, "The site is not served over HTTPS.", explanation,
            "Install a TLS certificate and redirect all HTTP traffic to HTTPS."
        )

    mismatched = [url for url in (site, home) if not uses_tls(url)]
    if mismatched:
        return make_result(
            TITLE_HTTPS, Status.WARNING,
            f"HTTPS is active but these URLs still use HTTP: {', '.join(mismatched)}.", explanation,
            "Update the Site Address and WordPress Address to https:// URLs."
        )

    return make_result(TITLE_HTTPS, Status.PASS, "HTTPS is active and site URLs use HTTPS.", explanation)


async def check_file_editing(ctx: AuditContext) -> AuditResult:
    explanation = "The built-in file editor lets anyone with an admin session run arbitrary PHP."

    if ctx.env.config_flag("DISALLOW_FILE_MODS"):
        return make_result(TITLE_FILE_EDITING, Status.PASS, "All file modifications are disabled.", explanation)
    if ctx.env.config_flag("DISALLOW_FILE_EDIT"):
        return make_result(TITLE_FILE_EDITING, Status.PASS, "The theme and plugin editor is disabled.", explanation)

    return make_result(
        TITLE_FILE_EDITING, Status.FAIL, "The theme and plugin editor is enabled.", explanation,
        "Add define('DISALLOW_FILE_EDIT', true); to wp-config.php."
    )


async def check_db_prefix(ctx: AuditContext) -> AuditResult:
    explanation = "A non-default table prefix makes automated SQL injection payloads less likely to work."
    prefix = ctx.env.table_prefix()

    if prefix == SECURITY_DEFAULTS.table_prefix:
        return make_result(
            TITLE_DB_PREFIX, Status.WARNING, f"The default table prefix '{prefix}' is in use.", explanation,
            "Use a random table prefix when installing or migrating the site."
        )

    return make_result(TITLE_DB_PREFIX, Status.PASS, f"Custom table prefix '{prefix}' is in use.", explanation)


async def check_admin_username(ctx: AuditContext) -> AuditResult:
    explanation = "Default usernames are the first guess in every brute force attack."
    found = [name for name in SECURITY_DEFAULTS.admin_usernames if ctx.env.username_exists(name)]

    if found:
        return make_result(
            TITLE_ADMIN_USERNAME, Status.FAIL,
            f"A user named '{found[0]}' exists.", explanation,
            "Create a new administrator with a unique name and delete the default account."
        )

    return make_result(TITLE_ADMIN_USERNAME, Status.PASS, "No default admin username found.", explanation)
