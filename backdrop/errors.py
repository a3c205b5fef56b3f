"""
Exceptions raised by the background removal pipeline.
"""


class BackdropError(Exception):
    """Base class for all backdrop errors."""


class InvalidDimensions(BackdropError, ValueError):
    """Width/height are not positive or the buffer size does not match them."""


class ThresholdOutOfRange(BackdropError, ValueError):
    """The edge threshold is not a usable number."""


class ExecutorUnavailable(BackdropError, RuntimeError):
    """The execution channel cannot accept a request."""


class RequestTimeout(BackdropError, TimeoutError):
    """A strip request did not answer before its deadline."""


class RequestCancelled(BackdropError):
    """A strip request was abandoned through its cancellation token."""
