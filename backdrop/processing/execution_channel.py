"""
Request/response boundary to the worker that processes strips.

A channel owns one single-worker executor. Each request carries its own copy of
the strip, so the caller's buffer is never touched while work is in flight.
"""
import multiprocessing
import threading
import time
from concurrent.futures import (
    BrokenExecutor,
    CancelledError,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    TimeoutError as FutureTimeoutError,
    wait as wait_futures,
)
from dataclasses import dataclass

import numpy as np

from ..errors import ExecutorUnavailable, RequestCancelled, RequestTimeout
from ..raster_ops.edge_detection import detect_edges
from ..raster_ops.pixel_metrics import BACKGROUND_LEVEL
from ..raster_ops.region_growing import CHUNK_SIZE, RegionGrower

EXECUTORS = {
    "thread": ThreadPoolExecutor,
    "process": ProcessPoolExecutor,
}

# Seconds between checks of the caller's token while a request is in flight
POLL_INTERVAL = 0.05


class CancellationToken:
    """
    Flag shared between the caller and the worker to abandon a run.

    `event` defaults to a `threading.Event`. A `multiprocessing.Manager`
    event proxy makes the token usable from a worker process.
    """

    def __init__(self, event=None):
        self._event = event if event is not None else threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self):
        return self._event.is_set()

    def raise_if_cancelled(self, message="Request was cancelled"):
        if self._event.is_set():
            raise RequestCancelled(message)


@dataclass
class StripRequest:
    """One strip of pixels and the settings to process it with."""
    pixels: np.ndarray
    threshold: float
    index: int = 0
    start_row: int = 0
    chunk_size: int = CHUNK_SIZE
    background_level: int = BACKGROUND_LEVEL
    expand_through_foreground: bool = False


@dataclass
class StripResponse:
    """The processed strip plus counters collected while processing it."""
    pixels: np.ndarray
    index: int
    start_row: int
    edge_count: int
    visited_count: int
    cleared_count: int
    chunks: int
    duration: float


def run_strip(request, cancel_token=None):
    """
    Worker side of the channel: edge detection followed by region growing.

    The token is checked before starting and at every suspension point of the
    region grower.
    """
    start = time.time()
    if cancel_token is not None:
        cancel_token.raise_if_cancelled(f"Strip {request.index} cancelled before it started")

    edges = detect_edges(request.pixels, request.threshold)
    grower = RegionGrower(
        request.pixels,
        edges,
        chunk_size=request.chunk_size,
        background_level=request.background_level,
        expand_through_foreground=request.expand_through_foreground,
    )
    for _ in grower.grow():
        if cancel_token is not None:
            cancel_token.raise_if_cancelled(f"Strip {request.index} cancelled while processing")

    return StripResponse(
        pixels=grower.pixels,
        index=request.index,
        start_row=request.start_row,
        edge_count=int(edges.sum()),
        visited_count=grower.processed,
        cleared_count=grower.cleared,
        chunks=grower.chunks,
        duration=time.time() - start,
    )


class ExecutionChannel:
    """
    Single-request channel to an off-thread worker.

    Attributes:
    -----------
        executor (str): "thread" (default) or "process".

    Use it as a context manager, or call `open()` before the first request
    and `close()` after the last one has settled.
    """
    def __init__(self, executor="thread"):
        if executor not in EXECUTORS:
            raise ValueError(f"Unknown executor '{executor}'. Available executors: {list(EXECUTORS)}")
        self.executor = executor
        self._pool = None
        self._manager = None
        self._busy = threading.Lock()

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @property
    def is_open(self):
        return self._pool is not None

    def open(self):
        """Start the worker if it is not running yet."""
        if self._pool is None:
            if self.executor == "process":
                # Serves the events that carry cancellation into the worker process
                self._manager = multiprocessing.Manager()
            self._pool = EXECUTORS[self.executor](max_workers=1)
        return self

    def close(self, wait=True):
        """Stop the worker. Queued work is dropped."""
        pool, self._pool = self._pool, None
        manager, self._manager = self._manager, None
        if pool is not None:
            pool.shutdown(wait=wait, cancel_futures=True)
        if manager is not None:
            manager.shutdown()

    def request(self, request, timeout=None, cancel_token=None):
        """
        Send one strip to the worker and wait for its response.

        Args:
            request (StripRequest): The strip to process. It is owned by the
                worker until the response arrives.
            timeout (float): Seconds to wait for the response, None waits forever.
            cancel_token (CancellationToken): Optional token to abandon the work.
                A timeout never cancels it, so the caller may retry with it.

        Returns:
            StripResponse: The processed strip.

        Raises:
            ExecutorUnavailable: The channel is closed, broken or already busy.
            RequestTimeout: No response arrived within `timeout` seconds.
            RequestCancelled: The token was cancelled.
        """
        if not self._busy.acquire(blocking=False):
            raise ExecutorUnavailable("A request is already in flight on this channel")
        try:
            return self._dispatch(request, timeout, cancel_token)
        finally:
            self._busy.release()

    def _request_token(self):
        if self._manager is not None:
            return CancellationToken(self._manager.Event())
        return CancellationToken()

    def _dispatch(self, request, timeout, cancel_token):
        pool = self._pool
        if pool is None:
            raise ExecutorUnavailable("Execution channel is not open")
        if cancel_token is not None:
            cancel_token.raise_if_cancelled(f"Strip {request.index} cancelled before dispatch")

        token = self._request_token()
        try:
            future = pool.submit(run_strip, request, token)
        except RuntimeError as e:
            raise ExecutorUnavailable(f"Execution channel cannot accept requests: {e}") from e

        try:
            return self._wait(future, timeout, cancel_token, token)
        except FutureTimeoutError as e:
            token.cancel()
            future.cancel()
            if self.executor == "process":
                terminate_workers(pool)
                self.close(wait=False)
            raise RequestTimeout(
                f"Strip {request.index} did not respond within {timeout} seconds"
            ) from e
        except BrokenExecutor as e:
            self.close(wait=False)
            raise ExecutorUnavailable(f"Worker stopped while processing strip {request.index}: {e}") from e
        except CancelledError as e:
            raise ExecutorUnavailable(f"Strip {request.index} was dropped by a closing channel") from e

    @staticmethod
    def _wait(future, timeout, cancel_token, token):
        """Wait for `future`, passing a cancellation of `cancel_token` on to `token`."""
        if cancel_token is None:
            return future.result(timeout=timeout)

        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if cancel_token.cancelled and not token.cancelled:
                token.cancel()
            step = POLL_INTERVAL
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise FutureTimeoutError()
                step = min(step, remaining)
            done, _ = wait_futures([future], timeout=step)
            if done:
                return future.result()


def terminate_workers(pool):
    """Stop the worker processes of a process pool without waiting for their tasks."""
    terminate = getattr(pool, "terminate_workers", None)
    if terminate is not None:
        terminate()
        return
    processes = list((getattr(pool, "_processes", None) or {}).values())
    for process in processes:
        process.terminate()
    for process in processes:
        process.join(5)
