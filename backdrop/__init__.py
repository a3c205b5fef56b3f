"""
Backdrop: edge-seeded background removal for RGBA images.
"""

from .backdrop import Backdrop
from .errors import *
from .processing import *
from .config import Config

__version__ = "0.1.0"
__author__ = "Tahn Jandai"
__email__ = "taja6898@colorado.edu"

__all__ = [
    "Backdrop",
    "Config",
    "BackdropError",
    "InvalidDimensions",
    "ThresholdOutOfRange",
    "ExecutorUnavailable",
    "RequestTimeout",
    "RequestCancelled",
]
