"""
Tests for the security checks.
"""
import httpx
import pytest

from conftest import FakeEnvironment, make_context
from site_inspector.services.checks.models import Status
from site_inspector.services.checks.security import (
    check_admin_username,
    check_db_prefix,
    check_file_editing,
    check_https,
    check_registration,
    check_rest_user_enumeration,
    check_version_disclosure,
    check_xmlrpc,
)

METHOD_LIST = """<?xml version="1.0" encoding="UTF-8"?>
<methodResponse>
  <params><param><value><array><data>
    <value><string>system.multicall</string></value>
    <value><string>system.listMethods</string></value>
    <value><string>wp.getUsersBlogs</string></value>
  </data></array></value></param></params>
</methodResponse>"""

FAULT = """<?xml version="1.0" encoding="UTF-8"?>
<methodResponse><fault><value><struct>
  <member><name>faultCode</name><value><int>405</int></value></member>
  <member><name>faultString</name><value><string>XML-RPC services are disabled on this site.</string></value></member>
</struct></value></fault></methodResponse>"""


def refuse(request):
    raise httpx.ConnectError("Connection refused", request=request)


def time_out(request):
    raise httpx.ReadTimeout("timed out", request=request)


# --- REST user enumeration ---

@pytest.mark.asyncio
async def test_rest_users_exposed_fails():
    users = [{"id": 1, "name": "Jane", "slug": "jane"}, {"id": 2, "name": "Bob", "slug": "bob"}]
    ctx = make_context(handler=lambda request: httpx.Response(200, json=users))

    result = await check_rest_user_enumeration(ctx)

    assert result.status is Status.FAIL
    assert "2 user(s)" in result.message
    assert "jane" in result.message


@pytest.mark.asyncio
async def test_rest_users_protected_passes(ctx):
    result = await check_rest_user_enumeration(ctx)
    assert result.status is Status.PASS
    assert "401" in result.message


@pytest.mark.asyncio
async def test_rest_users_empty_list_passes():
    ctx = make_context(handler=lambda request: httpx.Response(200, json=[]))
    assert (await check_rest_user_enumeration(ctx)).status is Status.PASS


@pytest.mark.asyncio
async def test_rest_users_non_json_passes():
    ctx = make_context(handler=lambda request: httpx.Response(200, text="<html>blocked</html>"))
    assert (await check_rest_user_enumeration(ctx)).status is Status.PASS


@pytest.mark.asyncio
async def test_rest_users_probe_failure_warns():
    result = await check_rest_user_enumeration(make_context(handler=time_out))
    assert result.status is Status.WARNING


@pytest.mark.asyncio
async def test_rest_users_probe_targets_home_url():
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(404)

    env = FakeEnvironment(site_url="https://example.com/wp", home_url="https://example.com")
    await check_rest_user_enumeration(make_context(env, handler=handler))
    assert seen == ["https://example.com/wp-json/wp/v2/users"]


# --- XML-RPC ---

@pytest.mark.asyncio
async def test_xmlrpc_connection_refused_passes():
    result = await check_xmlrpc(make_context(handler=refuse))
    assert result.status is Status.PASS


@pytest.mark.asyncio
async def test_xmlrpc_method_list_fails():
    ctx = make_context(handler=lambda request: httpx.Response(200, text=METHOD_LIST))
    result = await check_xmlrpc(ctx)
    assert result.status is Status.FAIL
    assert "3 methods" in result.message


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [401, 403, 405])
async def test_xmlrpc_blocked_status_passes(status_code):
    ctx = make_context(handler=lambda request: httpx.Response(status_code))
    result = await check_xmlrpc(ctx)
    assert result.status is Status.PASS
    assert str(status_code) in result.message


@pytest.mark.asyncio
async def test_xmlrpc_fault_passes():
    ctx = make_context(handler=lambda request: httpx.Response(200, text=FAULT))
    assert (await check_xmlrpc(ctx)).status is Status.PASS


@pytest.mark.asyncio
async def test_xmlrpc_ambiguous_response_warns():
    ctx = make_context(handler=lambda request: httpx.Response(200, text="<html>Welcome</html>"))
    assert (await check_xmlrpc(ctx)).status is Status.WARNING


@pytest.mark.asyncio
async def test_xmlrpc_timeout_warns():
    assert (await check_xmlrpc(make_context(handler=time_out))).status is Status.WARNING


@pytest.mark.asyncio
async def test_xmlrpc_probe_is_a_list_methods_post():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["body"] = request.content.decode()
        return httpx.Response(403)

    await check_xmlrpc(make_context(handler=handler))
    assert seen["method"] == "POST"
    assert "system.listMethods" in seen["body"]


# --- Registration ---

@pytest.mark.asyncio
@pytest.mark.parametrize("options, expected", [
    ({}, Status.PASS),
    ({"users_can_register": "0"}, Status.PASS),
    ({"users_can_register": True, "default_role": "subscriber"}, Status.WARNING),
    ({"users_can_register": "1"}, Status.WARNING),
    ({"users_can_register": 1, "default_role": "administrator"}, Status.FAIL),
    ({"users_can_register": True, "default_role": "editor"}, Status.FAIL),
])
async def test_registration(options, expected):
    result = await check_registration(make_context(FakeEnvironment(options=options)))
    assert result.status is expected


@pytest.mark.asyncio
async def test_registration_message_names_role():
    env = FakeEnvironment(options={"users_can_register": True, "default_role": "editor"})
    result = await check_registration(make_context(env))
    assert "editor" in result.message


# --- Version disclosure ---

@pytest.mark.asyncio
async def test_version_hidden_passes(ctx):
    assert (await check_version_disclosure(ctx)).status is Status.PASS


@pytest.mark.asyncio
async def test_version_generator_tag_fails():
    page = '<html><head><meta name="generator" content="WordPress 6.4.2"></head></html>'

    def handler(request):
        if request.url.path == "/":
            return httpx.Response(200, text=page)
        return httpx.Response(404)

    result = await check_version_disclosure(make_context(handler=handler))
    assert result.status is Status.FAIL
    assert "generator tag" in result.message


@pytest.mark.asyncio
async def test_version_asset_strings_fail():
    page = '<html><head><script src="/wp-includes/js/wp-embed.min.js?ver=6.4.2"></script></head></html>'

    def handler(request):
        if request.url.path == "/":
            return httpx.Response(200, text=page)
        return httpx.Response(404)

    result = await check_version_disclosure(make_context(handler=handler))
    assert result.status is Status.FAIL
    assert "asset version strings" in result.message


@pytest.mark.asyncio
async def test_version_asset_with_longer_version_passes():
    page = (
        "<html><head>"
        '<script src="/wp-content/plugins/slider/slider.js?ver=6.4.1"></script>'
        '<link rel="stylesheet" href="/wp-content/themes/t/style.css?ver=6.45&amp;x=1">'
        "</head></html>"
    )

    def handler(request):
        if request.url.path == "/":
            return httpx.Response(200, text=page)
        return httpx.Response(404)

    env = FakeEnvironment(core_version="6.4")
    result = await check_version_disclosure(make_context(env, handler=handler))
    assert result.status is Status.PASS


@pytest.mark.asyncio
async def test_version_asset_with_exact_version_among_params_fails():
    page = '<html><head><script src="/wp-includes/js/jquery.js?ver=6.4&amp;min=1"></script></head></html>'

    def handler(request):
        if request.url.path == "/":
            return httpx.Response(200, text=page)
        return httpx.Response(404)

    env = FakeEnvironment(core_version="6.4")
    result = await check_version_disclosure(make_context(env, handler=handler))
    assert result.status is Status.FAIL


@pytest.mark.asyncio
async def test_version_core_asset_without_known_version_fails():
    page = '<html><head><link rel="stylesheet" href="/wp-includes/css/dashicons.min.css?ver=6.1"></head></html>'

    def handler(request):
        if request.url.path == "/":
            return httpx.Response(200, text=page)
        return httpx.Response(404)

    env = FakeEnvironment(core_version=None)
    result = await check_version_disclosure(make_context(env, handler=handler))
    assert result.status is Status.FAIL


@pytest.mark.asyncio
async def test_version_readme_file_fails():
    def handler(request):
        if request.url.path == "/readme.html":
            return httpx.Response(200, text="<h1>WordPress</h1><br /> Version 6.4.2")
        return httpx.Response(200, text="<html></html>")

    result = await check_version_disclosure(make_context(handler=handler))
    assert result.status is Status.FAIL
    assert "readme.html" in result.message


@pytest.mark.asyncio
async def test_version_probe_failure_warns():
    assert (await check_version_disclosure(make_context(handler=time_out))).status is Status.WARNING


# --- HTTPS ---

@pytest.mark.asyncio
async def test_https_all_secure_passes(ctx):
    assert (await check_https(ctx)).status is Status.PASS


@pytest.mark.asyncio
async def test_https_mismatched_urls_warn():
    env = FakeEnvironment(site_url="https://example.com", home_url="http://example.com", ssl=True)
    result = await check_https(make_context(env))
    assert result.status is Status.WARNING
    assert "http://example.com" in result.message


@pytest.mark.asyncio
async def test_https_inactive_fails():
    env = FakeEnvironment(site_url="http://example.com")
    assert (await check_https(make_context(env))).status is Status.FAIL


# --- Configuration hardening ---

@pytest.mark.asyncio
@pytest.mark.parametrize("constants, expected", [
    ({"DISALLOW_FILE_MODS": True}, Status.PASS),
    ({"DISALLOW_FILE_EDIT": True}, Status.PASS),
    ({"DISALLOW_FILE_EDIT": False}, Status.FAIL),
    ({}, Status.FAIL),
])
async def test_file_editing(constants, expected):
    result = await check_file_editing(make_context(FakeEnvironment(constants=constants)))
    assert result.status is expected


@pytest.mark.asyncio
async def test_db_prefix():
    default = await check_db_prefix(make_context(FakeEnvironment(table_prefix="wp_")))
    custom = await check_db_prefix(make_context(FakeEnvironment(table_prefix="xk7_")))

    assert default.status is Status.WARNING
    assert custom.status is Status.PASS
    assert "xk7_" in custom.message


@pytest.mark.asyncio
@pytest.mark.parametrize("usernames, expected", [
    (["editor"], Status.PASS),
    (["admin"], Status.FAIL),
    (["jane", "administrator"], Status.FAIL),
])
async def test_admin_username(usernames, expected):
    result = await check_admin_username(make_context(FakeEnvironment(usernames=usernames)))
    assert result.status is expected
