"""Turning parsed options into a ready work instance."""

from __future__ import annotations

import asyncio
import ipaddress
import socket
from datetime import timedelta
from pathlib import Path

from .client import DEFAULT_PORTS, Http1ConnectionPool, IPAddress, WorkInstance
from .errors import (
    FailedToReadBodyFromFile,
    FailedToResolveDns,
    NoWayToResolveHost,
    RequirePostBody,
    UnsupportedMethod,
    WeirdUrl,
)
from .opts import Opts, build_header_map
from .work_mode import PostWorkModeSpec, RequestCounter, WorkMode


async def read_body_from(path: Path) -> bytes:
    return await asyncio.to_thread(Path(path).read_bytes)


async def _resolve(host: str, family: socket.AddressFamily) -> IPAddress | None:
    loop = asyncio.get_running_loop()
    for fam, _, _, _, sockaddr in await loop.getaddrinfo(host, 443, type=socket.SOCK_STREAM):
        if fam == family:
            return ipaddress.ip_address(sockaddr[0])
    return None


async def resolve_ipv4(host: str) -> ipaddress.IPv4Address | None:
    """The first IPv4 address the host name resolves to, if any."""
    return await _resolve(host, socket.AF_INET)


async def resolve_ipv6(host: str) -> ipaddress.IPv6Address | None:
    """The first IPv6 address the host name resolves to, if any."""
    return await _resolve(host, socket.AF_INET6)


async def _resolve_domain(host: str, use_v4: bool, use_v6: bool) -> IPAddress | None:
    try:
        if use_v6:
            found = await resolve_ipv6(host)
            if use_v4:
                found = found or await resolve_ipv4(host)
            return found
        if use_v4:
            return await resolve_ipv4(host)
    except OSError as exc:
        raise FailedToResolveDns(exc) from exc
    return None


async def _resolve_url_host(opts: Opts) -> IPAddress | None:
    hostname = opts.url.hostname
    if hostname is None:
        return None
    try:
        literal = ipaddress.ip_address(hostname)
    except ValueError:
        return await _resolve_domain(hostname, opts.ipv4, opts.ipv6)
    if isinstance(literal, ipaddress.IPv4Address) and opts.ipv4:
        return literal
    if isinstance(literal, ipaddress.IPv6Address) and opts.ipv6:
        return literal
    raise NoWayToResolveHost()


async def _work_mode(opts: Opts) -> WorkMode:
    if opts.method == "GET":
        return WorkMode()
    if opts.method != "POST":
        raise UnsupportedMethod(opts.method)
    if opts.body_string is not None and opts.body_file is None:
        return WorkMode(PostWorkModeSpec(opts.body_string.encode(), opts.content_type))
    if opts.body_string is None and opts.body_file is not None:
        try:
            body = await read_body_from(opts.body_file)
        except OSError as exc:
            raise FailedToReadBodyFromFile(exc) from exc
        return WorkMode(PostWorkModeSpec(body, opts.content_type))
    raise RequirePostBody()


async def prepare_work_instance(opts: Opts) -> WorkInstance:
    """Resolve the target, load the body and validate headers."""
    url = opts.url
    address = await _resolve_url_host(opts) or opts.host
    if address is None:
        raise NoWayToResolveHost()
    port = url.port if url.port is not None else DEFAULT_PORTS.get(url.scheme)
    if port is None:
        raise WeirdUrl()

    mode = await _work_mode(opts)
    header_map = build_header_map(opts.header)

    return WorkInstance(
        url=url,
        address=(address, port),
        mode=mode,
        header_map=header_map,
        request_counter=RequestCounter(),
        connection_pool=Http1ConnectionPool(opts.concurrent),
    )


async def shutdown(shutdown_event: asyncio.Event, duration: timedelta) -> None:
    """Set the shutdown event once ``duration`` has passed."""
    await asyncio.sleep(duration.total_seconds())
    shutdown_event.set()