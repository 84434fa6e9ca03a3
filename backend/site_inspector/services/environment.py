"""
Host Environment - Read-only accessor for configuration flags and options.

Checks never read global state directly; they go through a HostEnvironment so
tests can substitute a fake one.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Optional

from site_inspector.logger import logger
from site_inspector.schemas.environment import EnvironmentSnapshot
from site_inspector.services.probe import uses_tls
from site_inspector.services.sizes import UNLIMITED, parse_size


class HostEnvironment(ABC):
    """What the host knows about itself."""

    @abstractmethod
    def config_flag(self, name: str, default: bool = False) -> bool:
        """Boolean configuration constant (e.g. WP_DEBUG)."""

    @abstractmethod
    def option(self, name: str, default: Any = None) -> Any:
        """Site option value."""

    @abstractmethod
    def active_plugins(self) -> List[str]: ...

    @abstractmethod
    def runtime_version(self) -> str: ...

    @abstractmethod
    def memory_limit(self) -> str:
        """Raw PHP memory_limit value."""

    def wp_memory_limit(self) -> Optional[str]:
        return None

    @abstractmethod
    def object_cache_backend(self) -> Optional[str]:
        """Name of the external object cache backend, None when there is none."""

    @abstractmethod
    def table_prefix(self) -> str: ...

    @abstractmethod
    def username_exists(self, username: str) -> bool: ...

    @abstractmethod
    def site_url(self) -> str: ...

    def home_url(self) -> str:
        return self.site_url()

    def core_version(self) -> Optional[str]:
        return None

    def is_ssl(self) -> bool:
        return uses_tls(self.site_url())


class SnapshotEnvironment(HostEnvironment):
    """HostEnvironment backed by an exported EnvironmentSnapshot."""

    def __init__(self, snapshot: EnvironmentSnapshot):
        self.snapshot = snapshot
        self._usernames = {u.lower() for u in snapshot.usernames}

    @classmethod
    def from_file(cls, path: str) -> "SnapshotEnvironment":
        """Load and validate a snapshot JSON file.

        Raises:
            FileNotFoundError: the file does not exist
            pydantic.ValidationError: the document does not match the schema
        """
        logger.info(f"Loading environment snapshot from {path}")
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls(EnvironmentSnapshot.model_validate(data))

    def config_flag(self, name: str, default: bool = False) -> bool:
        return bool(self.snapshot.constants.get(name, default))

    def option(self, name: str, default: Any = None) -> Any:
        return self.snapshot.options.get(name, default)

    def active_plugins(self) -> List[str]:
        return list(self.snapshot.active_plugins)

    def runtime_version(self) -> str:
        return self.snapshot.runtime_version

    def memory_limit(self) -> str:
        return str(self.snapshot.memory_limit)

    def wp_memory_limit(self) -> Optional[str]:
        if self.snapshot.wp_memory_limit is None:
            return None
        return str(self.snapshot.wp_memory_limit)

    def object_cache_backend(self) -> Optional[str]:
        return self.snapshot.object_cache or None

    def table_prefix(self) -> str:
        return self.snapshot.table_prefix

    def username_exists(self, username: str) -> bool:
        return username.lower() in self._usernames

    def site_url(self) -> str:
        return self.snapshot.site_url

    def home_url(self) -> str:
        return self.snapshot.home_url or self.snapshot.site_url

    def core_version(self) -> Optional[str]:
        return self.snapshot.core_version

    def is_ssl(self) -> bool:
        if self.snapshot.is_ssl is not None:
            return self.snapshot.is_ssl
        return uses_tls(self.site_url())


def effective_memory_limit(env: HostEnvironment) -> int:
    """Memory available to the site in bytes, UNLIMITED (-1) for no limit.

    The CMS raises the PHP limit to WP_MEMORY_LIMIT when that is larger, so
    the effective value is the greater of the two.
    """
    ini_limit = parse_size(env.memory_limit())
    if ini_limit == UNLIMITED:
        return UNLIMITED

    configured = env.wp_memory_limit()
    if configured is None:
        return ini_limit

    wp_limit = parse_size(configured)
    if wp_limit == UNLIMITED:
        return UNLIMITED
    return max(ini_limit, wp_limit)
