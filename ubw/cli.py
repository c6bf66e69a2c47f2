"""Command entry point: run the workers until time runs out or a signal arrives."""

from __future__ import annotations

import asyncio
import contextlib
import signal
import sys
from collections.abc import Sequence

from .before_request import prepare_work_instance, shutdown
from .client import WorkInstance, request_loop
from .emiya import wait_for_incantation
from .errors import UbwError
from .opts import Opts, parse_args
from .work_mode import counter_print

_SIGNAL_MESSAGES = {
    "SIGINT": "Received Ctrl+C signal",
    "SIGTERM": "Received terminate signal",
    "SIGBREAK": "Received shutdown signal",
}


async def _worker(work_instance: WorkInstance, shutdown_event: asyncio.Event) -> None:
    try:
        await request_loop(work_instance, shutdown_event)
    except Exception as exc:  # a worker failing must not stop the others
        print(f"Failed to start request loop: {exc}", file=sys.stderr, flush=True)


async def handle_shutdown_signals(shutdown_event: asyncio.Event) -> None:
    """Wait for an interrupt or termination signal, report it and set the event."""
    loop = asyncio.get_running_loop()
    received: asyncio.Future[str] = loop.create_future()

    def on_signal(name: str) -> None:
        if not received.done():
            received.set_result(name)

    via_loop: list[signal.Signals] = []
    via_handler: list[tuple[signal.Signals, object]] = []
    for name in _SIGNAL_MESSAGES:
        signum = signal.Signals.__members__.get(name)
        if signum is None:
            continue
        try:
            loop.add_signal_handler(signum, on_signal, name)
            via_loop.append(signum)
        except NotImplementedError:
            previous = signal.signal(
                signum, lambda _s, _f, n=name: loop.call_soon_threadsafe(on_signal, n)
            )
            via_handler.append((signum, previous))
    try:
        name = await received
    finally:
        for signum in via_loop:
            loop.remove_signal_handler(signum)
        for signum, previous in via_handler:
            signal.signal(signum, previous)

    print(_SIGNAL_MESSAGES[name], flush=True)
    shutdown_event.set()


async def run(opts: Opts) -> None:
    """Prepare the target and keep ``opts.concurrent`` workers busy until shutdown."""
    if not opts.instant_cast:
        await asyncio.to_thread(wait_for_incantation)

    work_instance = await prepare_work_instance(opts)
    shutdown_event = asyncio.Event()

    workers = [
        asyncio.create_task(_worker(work_instance, shutdown_event))
        for _ in range(opts.concurrent)
    ]
    monitor = asyncio.create_task(counter_print(work_instance.request_counter, shutdown_event))
    helpers = [asyncio.create_task(handle_shutdown_signals(shutdown_event))]
    if opts.max_time is not None:
        helpers.append(asyncio.create_task(shutdown(shutdown_event, opts.max_time)))

    try:
        await shutdown_event.wait()
        print("Shutting down gracefully...", flush=True)
        await asyncio.gather(*workers)
        await monitor
        print("All tasks completed, goodbye!", flush=True)
    finally:
        for task in (*workers, monitor, *helpers):
            task.cancel()
        for task in (*workers, monitor, *helpers):
            with contextlib.suppress(asyncio.CancelledError):
                await task


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command; with no arguments only the incantation is awaited."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        if not args:
            wait_for_incantation()
            return 0
        asyncio.run(run(parse_args(args)))
    except (UbwError, EOFError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0