"""HTTP/1.1 connections, the request sender and the per-worker request loop."""

from __future__ import annotations

import asyncio
import contextlib
import ipaddress
import ssl
from dataclasses import dataclass
from typing import Any
from urllib.parse import SplitResult

import h11

from .work_mode import RequestCounter, ResponseClass, WorkMode

DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443, "ftp": 21}
MAX_RETRIES = 10
_READ_SIZE = 65536

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


@dataclass(frozen=True)
class PreparedRequest:
    """A request ready to be written to any connection, as often as needed."""

    method: str
    target: str
    headers: tuple[tuple[str, str], ...]
    body: bytes = b""


class Connection:
    """One HTTP/1.1 client connection over a plain or TLS stream."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self._reader = reader
        self._writer = writer
        self._h11 = h11.Connection(h11.CLIENT)

    async def send_request(self, request: PreparedRequest) -> int:
        """Send one request, read the whole response and return its status code."""
        conn = self._h11
        headers = [(name.encode("ascii"), value.encode("utf-8")) for name, value in request.headers]
        data = conn.send(h11.Request(method=request.method, target=request.target, headers=headers))
        if request.body:
            data += conn.send(h11.Data(data=request.body))
        data += conn.send(h11.EndOfMessage())
        self._writer.write(data)
        await self._writer.drain()

        status: int | None = None
        while True:
            event = conn.next_event()
            if event is h11.NEED_DATA:
                conn.receive_data(await self._reader.read(_READ_SIZE))
            elif isinstance(event, h11.Response):
                status = event.status_code
            elif isinstance(event, h11.EndOfMessage):
                break
            elif isinstance(event, h11.ConnectionClosed):
                raise ConnectionError("connection closed before the response completed")
        if status is None:
            raise h11.RemoteProtocolError("response ended without a status line")
        if conn.our_state is h11.DONE and conn.their_state is h11.DONE:
            conn.start_next_cycle()
        return status

    def close(self) -> None:
        self._writer.close()


class Http1ConnectionPool:
    """A bounded store of idle connections; connections beyond capacity are dropped."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("connection pool capacity must be non-zero")
        self.capacity = capacity
        self._idle: list[Any] = []

    def try_get(self) -> Any | None:
        return self._idle.pop(0) if self._idle else None

    def put(self, conn: Any) -> None:
        if len(self._idle) < self.capacity:
            self._idle.append(conn)

    async def get_or_connect(self, work_instance: WorkInstance) -> Any:
        conn = self.try_get()
        if conn is not None:
            return conn
        return await work_instance.connect()


def _explicit_port(url: SplitResult) -> int | None:
    port = url.port
    if port is None or DEFAULT_PORTS.get(url.scheme) == port:
        return None
    return port


def status_to_code_type(status: int) -> ResponseClass:
    """Sort an HTTP status code into its counting bucket."""
    if 200 <= status <= 299:
        return ResponseClass.CODE2
    if 300 <= status <= 399:
        return ResponseClass.CODE3
    if 400 <= status <= 499:
        return ResponseClass.CODE4
    if 500 <= status <= 599:
        return ResponseClass.CODE5
    return ResponseClass.FAILURE


@dataclass
class WorkInstance:
    """Everything a worker needs to keep sending the same request."""

    url: SplitResult
    address: tuple[IPAddress, int]
    mode: WorkMode
    header_map: dict[str, str]
    request_counter: RequestCounter
    connection_pool: Http1ConnectionPool

    def build_request(self) -> PreparedRequest:
        target = self.url.path or "/"
        if self.url.query:
            target = f"{target}?{self.url.query}"

        headers: list[tuple[str, str]] = []
        hostname = self.url.hostname
        if hostname:
            host = f"[{hostname}]" if ":" in hostname else hostname
            port = _explicit_port(self.url)
            headers.append(("Host", host if port is None else f"{host}:{port}"))
        headers.extend(self.header_map.items())

        body = b""
        post = self.mode.post
        if post is not None:
            headers.append(("Content-Length", str(len(post.body))))
            if post.content_type is not None:
                headers.append(("Content-Type", post.content_type))
            body = post.body
        return PreparedRequest(self.mode.method(), target, tuple(headers), body)

    async def connect(self) -> Connection:
        """Open a TCP connection, with a TLS handshake for https URLs."""
        ip, port = self.address
        tls = ssl.create_default_context() if self.url.scheme == "https" else None
        reader, writer = await asyncio.open_connection(
            str(ip), port, ssl=tls, server_hostname=self.url.hostname if tls else None
        )
        return Connection(reader, writer)

    async def send(self, request: PreparedRequest) -> None:
        """Send the request once, retrying transport errors, and count the outcome."""
        retries = 0
        while True:
            try:
                conn = await self.connection_pool.get_or_connect(self)
            except OSError:
                self.request_counter.inc(ResponseClass.FAILURE)
                return
            try:
                status = await conn.send_request(request)
            except (OSError, h11.ProtocolError):
                conn.close()
                retries += 1
                if retries >= MAX_RETRIES:
                    self.request_counter.inc(ResponseClass.FAILURE)
                    return
                await asyncio.sleep(2**retries / 1000)
                continue
            except BaseException:
                conn.close()
                raise
            conn.close()
            self.request_counter.inc(status_to_code_type(status))
            return


async def request_loop(work_instance: WorkInstance, shutdown_event: asyncio.Event) -> None:
    """Send requests back to back until the shutdown event is set."""
    request = work_instance.build_request()
    waiter = asyncio.ensure_future(shutdown_event.wait())
    try:
        while True:
            sender = asyncio.ensure_future(work_instance.send(request))
            done, _ = await asyncio.wait({sender, waiter}, return_when=asyncio.FIRST_COMPLETED)
            if waiter in done:
                sender.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await sender
                return
    finally:
        waiter.cancel()