"""
Check Registry - Declared order of checks per category.

Report order follows these tuples exactly.
"""
from typing import Dict, Tuple

from site_inspector.services.checks import performance as perf
from site_inspector.services.checks import security as sec
from site_inspector.services.checks.models import CheckSpec

PERFORMANCE = "performance"
SECURITY = "security"

CHECKS: Dict[str, Tuple[CheckSpec, ...]] = {
    PERFORMANCE: (
        CheckSpec(perf.TITLE_ACTIVE_PLUGINS, perf.check_active_plugins),
        CheckSpec(perf.TITLE_PAGE_CACHE, perf.check_page_cache),
        CheckSpec(perf.TITLE_OBJECT_CACHE, perf.check_object_cache),
        CheckSpec(perf.TITLE_CDN, perf.check_cdn),
        CheckSpec(perf.TITLE_COMPRESSION, perf.check_compression),
        CheckSpec(perf.TITLE_PHP_VERSION, perf.check_php_version),
        CheckSpec(perf.TITLE_MEMORY_LIMIT, perf.check_memory_limit),
        CheckSpec(perf.TITLE_DEBUG_MODE, perf.check_debug_mode),
    ),
    SECURITY: (
        CheckSpec(sec.TITLE_REST_USERS, sec.check_rest_user_enumeration),
        CheckSpec(sec.TITLE_XMLRPC, sec.check_xmlrpc),
        CheckSpec(sec.TITLE_REGISTRATION, sec.check_registration),
        CheckSpec(sec.TITLE_VERSION_DISCLOSURE, sec.check_version_disclosure),
        CheckSpec(sec.TITLE_HTTPS, sec.check_https),
        CheckSpec(sec.TITLE_FILE_EDITING, sec.check_file_editing),
        CheckSpec(sec.TITLE_DB_PREFIX, sec.check_db_prefix),
        CheckSpec(sec.TITLE_ADMIN_USERNAME, sec.check_admin_username),
    ),
}

CATEGORIES = (PERFORMANCE, SECURITY)
