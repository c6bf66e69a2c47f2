"""Command-line options and header handling."""

from __future__ import annotations

import argparse
import ipaddress
import re
import string
import sys
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any
from urllib.parse import SplitResult, urlsplit

from .errors import InvalidHeaderName, InvalidHeaderValue

_VERSION = "0.1.0"
_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")
_SPECIAL_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})

_NS_PER_SECOND = 1_000_000_000
_UNIT_NANOS = {
    **dict.fromkeys(("nanos", "nsec", "ns"), 1),
    **dict.fromkeys(("micros", "usec", "us", "µs"), 1_000),
    **dict.fromkeys(("millis", "msec", "ms"), 1_000_000),
    **dict.fromkeys(("seconds", "second", "secs", "sec", "s"), _NS_PER_SECOND),
    **dict.fromkeys(("minutes", "minute", "mins", "min", "m"), 60 * _NS_PER_SECOND),
    **dict.fromkeys(("hours", "hour", "hrs", "hr", "h"), 3600 * _NS_PER_SECOND),
    **dict.fromkeys(("days", "day", "d"), 86_400 * _NS_PER_SECOND),
    **dict.fromkeys(("weeks", "week", "w"), 604_800 * _NS_PER_SECOND),
    **dict.fromkeys(("months", "month", "M"), 2_630_016 * _NS_PER_SECOND),
    **dict.fromkeys(("years", "year", "y"), 31_557_600 * _NS_PER_SECOND),
}
_DURATION_PART = re.compile(r"\s*(\d+)\s*([^\d\s]+)")


@dataclass(frozen=True)
class HeaderListItem:
    """One ``Name: value`` pair given on the command line."""

    header_name: str
    header_value: str

    @classmethod
    def parse(cls, text: str) -> HeaderListItem:
        name, sep, value = text.partition(":")
        if not sep:
            raise ValueError("Invalid header format")
        return cls(name.strip(), value.strip())


@dataclass
class Opts:
    """Parsed command-line options."""

    url: SplitResult
    concurrent: int = 1
    max_time: timedelta | None = None
    host: ipaddress.IPv4Address | ipaddress.IPv6Address | None = None
    header: list[HeaderListItem] = field(default_factory=list)
    method: str = "GET"
    body_string: str | None = None
    body_file: Path | None = None
    proxy_headers: list[str] = field(default_factory=list)
    accept_headers: list[str] = field(default_factory=list)
    content_type: str | None = None
    ipv6: bool = True
    ipv4: bool = True
    instant_cast: bool = False


def parse_duration(text: str) -> timedelta:
    """Parse a human duration such as ``10s``, ``1h 30m`` or ``250ms``."""
    total_ns = 0
    pos = 0
    parts = 0
    stripped = text.rstrip()
    while pos < len(stripped):
        match = _DURATION_PART.match(stripped, pos)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        number, unit = match.groups()
        if unit not in _UNIT_NANOS:
            raise ValueError(f"unknown time unit {unit!r}")
        total_ns += int(number) * _UNIT_NANOS[unit]
        pos = match.end()
        parts += 1
    if not parts:
        raise ValueError("value was empty")
    return timedelta(microseconds=total_ns // 1000)


def _parse_url(text: str) -> SplitResult:
    url = urlsplit(text.strip())
    if not url.scheme:
        raise ValueError("relative URL without a base")
    if url.scheme in _SPECIAL_SCHEMES and not url.hostname:
        raise ValueError("empty host")
    url.port  # raises ValueError on an out-of-range or malformed port
    return url


def _parse_u16(text: str) -> int:
    value = int(text)
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"{value} is not in 0..=65535")
    return value


def _parse_method(text: str) -> str:
    if not text or any(ch not in _TOKEN_CHARS for ch in text):
        raise ValueError("invalid HTTP method")
    return text


def _argument(parse: Callable[[str], Any], name: str) -> Callable[[str], Any]:
    def convert(text: str) -> Any:
        try:
            return parse(text)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    convert.__name__ = name
    return convert


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ubw", description="HTTP load generator")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {_VERSION}")
    parser.add_argument(
        "-u", dest="url", required=True, type=_argument(_parse_url, "url"),
        help="The URL to fetch",
    )
    parser.add_argument(
        "-c", dest="concurrent", default=1, type=_argument(_parse_u16, "concurrent"),
        help="The number of concurrent requests",
    )
    parser.add_argument(
        "-t", dest="max_time", default=None, type=_argument(parse_duration, "duration"),
        help="The maximum time to wait for a response",
    )
    parser.add_argument(
        "-i", dest="host", default=None, type=_argument(ipaddress.ip_address, "address"),
        help="Simulate host file",
    )
    parser.add_argument(
        "-H", "--header", dest="header", action="append", default=None,
        type=_argument(HeaderListItem.parse, "header"),
        help="Add headers to the request",
    )
    parser.add_argument(
        "-X", dest="method", default="GET", type=_argument(_parse_method, "method"),
        help="The HTTP method to use",
    )
    parser.add_argument("-d", "--data", dest="body_string", default=None, help="The body to send")
    parser.add_argument(
        "-D", "--data-binary", dest="body_file", default=None, type=Path,
        help="The file to send",
    )
    parser.add_argument(
        "--proxy-header", dest="proxy_headers", action="append", default=None,
        help="Add headers to the proxy request",
    )
    parser.add_argument(
        "-A", "--accept-header", dest="accept_headers", action="append", default=None,
        help="Add headers to the accept request",
    )
    parser.add_argument(
        "-T", "--content-type", dest="content_type", default=None,
        help="The content type to use",
    )
    parser.add_argument("-6", dest="ipv6", action="store_true", default=True, help="Use IPv6")
    parser.add_argument("-4", dest="ipv4", action="store_true", default=True, help="Use IPv4")
    parser.add_argument(
        "--instant-cast", dest="instant_cast", action="store_true", default=False,
        help="Don't wait for incitation",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> Opts:
    """Parse the command line; with no arguments, print help and exit."""
    args = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    if not args:
        parser.print_help(sys.stderr)
        raise SystemExit(2)
    namespace = vars(parser.parse_args(args))
    for name in ("header", "proxy_headers", "accept_headers"):
        namespace[name] = namespace[name] or []
    return Opts(**namespace)


def build_header_map(items: Iterable[HeaderListItem]) -> dict[str, str]:
    """Validate headers into a map of lower-cased names; later names replace earlier."""
    headers: dict[str, str] = {}
    for item in items:
        name = item.header_name
        if not name or any(ch not in _TOKEN_CHARS for ch in name):
            raise InvalidHeaderName(name)
        value = item.header_value
        if any(not (ch == "\t" or " " <= ch <= "~") for ch in value):
            raise InvalidHeaderValue(value)
        headers[name.lower()] = value
    return headers