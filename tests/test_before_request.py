import asyncio
import dataclasses
import ipaddress
from datetime import timedelta

import pytest

from ubw.before_request import (
    prepare_work_instance,
    read_body_from,
    resolve_ipv4,
    resolve_ipv6,
    shutdown,
)
from ubw.errors import (
    FailedToReadBodyFromFile,
    InvalidHeaderName,
    NoWayToResolveHost,
    RequirePostBody,
    UnsupportedMethod,
    WeirdUrl,
)
from ubw.opts import parse_args


def opts_for(*args):
    return parse_args(["--instant-cast", *args])


@pytest.mark.asyncio
async def test_read_body_round_trip(tmp_path):
    path = tmp_path / "body.bin"
    path.write_bytes(b"\x00\x01payload")
    assert await read_body_from(path) == b"\x00\x01payload"


@pytest.mark.asyncio
async def test_resolve_numeric_address():
    assert await resolve_ipv4("127.0.0.1") == ipaddress.IPv4Address("127.0.0.1")
    assert await resolve_ipv6("127.0.0.1") is None


@pytest.mark.asyncio
async def test_ipv4_literal_with_port():
    wi = await prepare_work_instance(opts_for("-u", "http://127.0.0.1:8080/x"))
    assert wi.address == (ipaddress.IPv4Address("127.0.0.1"), 8080)
    assert wi.mode.method() == "GET"
    assert wi.connection_pool.capacity == 1


@pytest.mark.asyncio
async def test_ipv6_literal_uses_https_default_port():
    wi = await prepare_work_instance(opts_for("-u", "https://[::1]/"))
    assert wi.address == (ipaddress.IPv6Address("::1"), 443)


@pytest.mark.asyncio
async def test_domain_is_resolved():
    wi = await prepare_work_instance(opts_for("-u", "http://localhost/"))
    address, port = wi.address
    assert address.is_loopback
    assert port == 80


@pytest.mark.asyncio
async def test_literal_of_disabled_family_is_rejected():
    opts = dataclasses.replace(opts_for("-u", "http://127.0.0.1/"), ipv4=False)
    with pytest.raises(NoWayToResolveHost):
        await prepare_work_instance(opts)


@pytest.mark.asyncio
async def test_host_option_used_when_resolution_disabled():
    opts = dataclasses.replace(
        opts_for("-u", "http://example.com/", "-i", "10.0.0.7"), ipv4=False, ipv6=False
    )
    wi = await prepare_work_instance(opts)
    assert wi.address == (ipaddress.IPv4Address("10.0.0.7"), 80)


@pytest.mark.asyncio
async def test_no_address_at_all():
    opts = dataclasses.replace(opts_for("-u", "http://example.com/"), ipv4=False, ipv6=False)
    with pytest.raises(NoWayToResolveHost):
        await prepare_work_instance(opts)


@pytest.mark.asyncio
async def test_unknown_scheme_has_no_port():
    with pytest.raises(WeirdUrl):
        await prepare_work_instance(opts_for("-u", "foo://127.0.0.1/"))


@pytest.mark.asyncio
async def test_post_with_string_body():
    wi = await prepare_work_instance(
        opts_for("-u", "http://127.0.0.1/", "-X", "POST", "-d", "a=1", "-T", "text/plain")
    )
    assert wi.mode.method() == "POST"
    assert wi.mode.post.body == b"a=1"
    assert wi.mode.post.content_type == "text/plain"


@pytest.mark.asyncio
async def test_post_with_file_body(tmp_path):
    path = tmp_path / "payload"
    path.write_bytes(b"file body")
    wi = await prepare_work_instance(
        opts_for("-u", "http://127.0.0.1/", "-X", "POST", "-D", str(path))
    )
    assert wi.mode.post.body == b"file body"
    assert wi.mode.post.content_type is None


@pytest.mark.asyncio
async def test_post_with_missing_file(tmp_path):
    opts = opts_for("-u", "http://127.0.0.1/", "-X", "POST", "-D", str(tmp_path / "missing"))
    with pytest.raises(FailedToReadBodyFromFile):
        await prepare_work_instance(opts)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "extra",
    [[], ["-d", "x", "-D", "file"]],
)
async def test_post_needs_exactly_one_body(extra):
    with pytest.raises(RequirePostBody):
        await prepare_work_instance(opts_for("-u", "http://127.0.0.1/", "-X", "POST", *extra))


@pytest.mark.asyncio
async def test_other_methods_are_unsupported():
    with pytest.raises(UnsupportedMethod) as info:
        await prepare_work_instance(opts_for("-u", "http://127.0.0.1/", "-X", "PUT"))
    assert info.value.method == "PUT"


@pytest.mark.asyncio
async def test_headers_are_validated_and_kept():
    wi = await prepare_work_instance(opts_for("-u", "http://127.0.0.1/", "-H", "X-Test: yes"))
    assert wi.header_map == {"x-test": "yes"}
    with pytest.raises(InvalidHeaderName):
        await prepare_work_instance(opts_for("-u", "http://127.0.0.1/", "-H", "Bad Name: x"))


@pytest.mark.asyncio
async def test_shutdown_sets_event_after_delay():
    event = asyncio.Event()
    task = asyncio.create_task(shutdown(event, timedelta(milliseconds=20)))
    await asyncio.sleep(0)
    assert not event.is_set()
    await task
    assert event.is_set()