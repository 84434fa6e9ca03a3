"""
Shared fixtures: a fake host environment and mock-transport probers.

No test touches the network; every HTTP probe is answered by an
httpx.MockTransport handler.
"""
import gzip
import socket
from typing import Callable, Dict, List, Optional

import httpx
import pytest

from site_inspector.services.checks.models import AuditContext, AuditResult, Status
from site_inspector.services.environment import HostEnvironment
from site_inspector.services.probe import Prober


class FakeEnvironment(HostEnvironment):
    """In-memory HostEnvironment with healthy defaults."""

    def __init__(
        self,
        site_url: str = "https://example.com",
        home_url: Optional[str] = None,
        ssl: Optional[bool] = None,
        constants: Optional[Dict[str, bool]] = None,
        options: Optional[dict] = None,
        plugins: Optional[List[str]] = None,
        runtime_version: str = "8.2.12",
        memory_limit: str = "256M",
        wp_memory_limit: Optional[str] = None,
        object_cache: Optional[str] = "redis",
        table_prefix: str = "xk7_",
        usernames: Optional[List[str]] = None,
        core_version: Optional[str] = "6.4.2",
    ):
        self._site_url = site_url
        self._home_url = home_url or site_url
        self._ssl = ssl
        self.constants = constants if constants is not None else {"WP_CACHE": True, "DISALLOW_FILE_EDIT": True}
        self.options = options or {}
        self.plugins = plugins if plugins is not None else ["wp-rocket/wp-rocket.php"]
        self._runtime_version = runtime_version
        self._memory_limit = memory_limit
        self._wp_memory_limit = wp_memory_limit
        self._object_cache = object_cache
        self._table_prefix = table_prefix
        self.usernames = usernames if usernames is not None else ["editor"]
        self._core_version = core_version

    def config_flag(self, name, default=False):
        return self.constants.get(name, default)

    def option(self, name, default=None):
        return self.options.get(name, default)

    def active_plugins(self):
        return list(self.plugins)

    def runtime_version(self):
        return self._runtime_version

    def memory_limit(self):
        return self._memory_limit

    def wp_memory_limit(self):
        return self._wp_memory_limit

    def object_cache_backend(self):
        return self._object_cache

    def table_prefix(self):
        return self._table_prefix

    def username_exists(self, username):
        return username in self.usernames

    def site_url(self):
        return self._site_url

    def home_url(self):
        return self._home_url

    def core_version(self):
        return self._core_version

    def is_ssl(self):
        if self._ssl is not None:
            return self._ssl
        return super().is_ssl()


HOME_PAGE = "<html><head><title>Home</title></head><body>Hello</body></html>"


def healthy_handler(request: httpx.Request) -> httpx.Response:
    """A well-configured site: compressed, behind Cloudflare, nothing exposed."""
    path = request.url.path
    if path.endswith("/xmlrpc.php"):
        return httpx.Response(403, text="Forbidden")
    if "/wp-json/wp/v2/users" in path:
        return httpx.Response(401, json={"code": "rest_forbidden"})
    if path.endswith("readme.html") or path.endswith("changelog.txt"):
        return httpx.Response(404, text="Not found")
    return httpx.Response(
        200,
        headers={"content-encoding": "gzip", "cf-ray": "8a1b2c3d4e5f-AMS"},
        content=gzip.compress(HOME_PAGE.encode()),
    )


def unresolvable(hostname: str) -> str:
    raise socket.gaierror(-2, "Name or service not known")


def make_prober(
    handler: Callable[[httpx.Request], httpx.Response],
    resolver: Callable[[str], str] = unresolvable,
) -> Prober:
    return Prober(transport=httpx.MockTransport(handler), resolver=resolver)


def make_context(env: Optional[HostEnvironment] = None, handler=healthy_handler, resolver=unresolvable) -> AuditContext:
    return AuditContext(env=env or FakeEnvironment(), prober=make_prober(handler, resolver))


def result_of(status: Status) -> AuditResult:
    return AuditResult(title=status.value, status=status, message="")


@pytest.fixture
def env():
    return FakeEnvironment()


@pytest.fixture
def ctx(env):
    return make_context(env)
