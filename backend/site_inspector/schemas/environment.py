"""
Pydantic schema for the host environment snapshot.

The snapshot is exported by the audited site and describes the state that
cannot be observed over HTTP: configuration constants, options, plugins,
runtime limits and user names.
"""

from typing import Dict, List, Optional, Union
from pydantic import BaseModel, Field


class EnvironmentSnapshot(BaseModel):
    """State of the audited install at export time."""
    site_url: str = Field(..., description="Site URL (siteurl option)")
    home_url: Optional[str] = Field(None, description="Home URL (home option), defaults to site_url")
    is_ssl: Optional[bool] = Field(None, description="Whether the host served the export over TLS")

    core_version: Optional[str] = Field(None, description="CMS core version")
    runtime_version: str = Field(..., description="PHP version string, e.g. 8.2.12")
    memory_limit: Union[str, int] = Field("128M", description="PHP memory_limit ini value")
    wp_memory_limit: Optional[Union[str, int]] = Field(None, description="WP_MEMORY_LIMIT constant")

    constants: Dict[str, bool] = Field(default_factory=dict, description="Boolean configuration constants")
    options: Dict[str, Union[str, int, bool, None]] = Field(default_factory=dict, description="Site options")
    active_plugins: List[str] = Field(default_factory=list, description="Active plugin files")

    object_cache: Optional[str] = Field(None, description="External object cache backend, if any")
    table_prefix: str = Field("wp_", description="Database table prefix")
    usernames: List[str] = Field(default_factory=list, description="Existing user logins")

    class Config:
        json_schema_extra = {
            "example": {
                "site_url": "https://example.com",
                "home_url": "https://example.com",
                "is_ssl": True,
                "core_version": "6.4.2",
                "runtime_version": "8.2.12",
                "memory_limit": "256M",
                "constants": {"WP_CACHE": True, "WP_DEBUG": False},
                "options": {"users_can_register": False, "default_role": "subscriber"},
                "active_plugins": ["wp-rocket/wp-rocket.php"],
                "object_cache": "redis",
                "table_prefix": "xk7_",
                "usernames": ["editor"]
            }
        }
