"""
Check Thresholds Configuration.

Decision boundaries for every check that compares a number or a version.
"""

from dataclasses import dataclass, field
from typing import Tuple

from site_inspector.services.sizes import MB_IN_BYTES


@dataclass
class PluginThresholds:
    """Active plugin count boundaries (inclusive upper bounds)."""
    pass_max: int = 15
    warning_max: int = 25


@dataclass
class RuntimeThresholds:
    """PHP version boundaries as (major, minor)."""
    recommended: Tuple[int, int] = (8, 1)
    minimum: Tuple[int, int] = (7, 4)


@dataclass
class MemoryThresholds:
    """Effective memory limit boundaries in bytes."""
    recommended: int = 256 * MB_IN_BYTES
    minimum: int = 128 * MB_IN_BYTES


@dataclass
class SecurityDefaults:
    """Values that indicate an untouched default install."""
    table_prefix: str = "wp_"
    lowest_role: str = "subscriber"
    admin_usernames: Tuple[str, ...] = ("admin", "administrator")
    xmlrpc_blocked_statuses: Tuple[int, ...] = field(default=(401, 403, 404, 405, 410))


# Default threshold instances
PLUGIN_THRESHOLDS = PluginThresholds()
RUNTIME_THRESHOLDS = RuntimeThresholds()
MEMORY_THRESHOLDS = MemoryThresholds()
SECURITY_DEFAULTS = SecurityDefaults()


# --- Validation (Prevent Drift) ---
def _validate_thresholds():
    """Ensure every pass boundary sits above its warning boundary."""
    if PLUGIN_THRESHOLDS.pass_max >= PLUGIN_THRESHOLDS.warning_max:
        raise ValueError("CRITICAL: plugin pass_max must be below warning_max")

    if RUNTIME_THRESHOLDS.recommended <= RUNTIME_THRESHOLDS.minimum:
        raise ValueError("CRITICAL: recommended runtime must be above minimum")

    if MEMORY_THRESHOLDS.recommended <= MEMORY_THRESHOLDS.minimum:
        raise ValueError("CRITICAL: recommended memory must be above minimum")

_validate_thresholds()
