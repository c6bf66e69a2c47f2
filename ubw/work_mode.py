"""Request kinds and the per-second response counter."""

from __future__ import annotations

import asyncio
import enum
import threading
from dataclasses import dataclass


class ResponseClass(enum.Enum):
    """The bucket a finished request is counted in."""

    CODE2 = "2xx"
    CODE3 = "3xx"
    CODE4 = "4xx"
    CODE5 = "5xx"
    FAILURE = "failure"


@dataclass(frozen=True)
class PostWorkModeSpec:
    """Body and optional content type of a POST request."""

    body: bytes
    content_type: str | None = None


@dataclass(frozen=True)
class WorkMode:
    """What to send: a GET when ``post`` is None, otherwise a POST."""

    post: PostWorkModeSpec | None = None

    def method(self) -> str:
        """The HTTP method of this mode."""
        return "GET" if self.post is None else "POST"


class RequestCounter:
    """Thread-safe counts of responses per class plus a running total."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts = dict.fromkeys(ResponseClass, 0)
        self._total = 0

    def inc(self, code_type: ResponseClass) -> None:
        with self._lock:
            self._counts[code_type] += 1
            self._total += 1

    def get(self, code_type: ResponseClass) -> int:
        with self._lock:
            return self._counts[code_type]

    def get_total(self) -> int:
        with self._lock:
            return self._total

    def reset(self, code_type: ResponseClass) -> None:
        """Zero one bucket; the running total is kept."""
        with self._lock:
            self._counts[code_type] = 0


def format_counts(counter: RequestCounter) -> str:
    """One status line with every bucket and the total."""
    return (
        f"2xx: {counter.get(ResponseClass.CODE2)}, "
        f"3xx: {counter.get(ResponseClass.CODE3)}, "
        f"4xx: {counter.get(ResponseClass.CODE4)}, "
        f"5xx: {counter.get(ResponseClass.CODE5)}, "
        f"failure: {counter.get(ResponseClass.FAILURE)}, "
        f"total: {counter.get_total()}"
    )


async def counter_print(counter: RequestCounter, shutdown_event: asyncio.Event) -> None:
    """Print and reset the buckets once a second until shutdown is signalled."""
    while True:
        try:
            await asyncio.wait_for(shutdown_event.wait(), timeout=1.0)
        except asyncio.TimeoutError:
            print(format_counts(counter), flush=True)
            for code_type in ResponseClass:
                counter.reset(code_type)
        else:
            return