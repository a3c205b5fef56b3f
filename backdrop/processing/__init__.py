"""
Processing module for backdrop package.

This module contains the strip-based processing components:
- ProcessingPipeline: Main orchestrator
- StripScheduler: Sends an image through the worker one strip at a time
- ExecutionChannel: Request/response boundary to the worker
- Processing utilities and helpers
"""

from .execution_channel import (
    CancellationToken,
    ExecutionChannel,
    StripRequest,
    StripResponse,
    run_strip,
)
from .strip_scheduler import StripScheduler, plan_strips, check_threshold, strip_progress
from .processing_pipeline import ProcessingPipeline
from .processing_utils import ProcessingMetrics

__all__ = [
    'ProcessingPipeline',
    'StripScheduler',
    'ExecutionChannel',
    'CancellationToken',
    'StripRequest',
    'StripResponse',
    'run_strip',
    'plan_strips',
    'check_threshold',
    'strip_progress',
    'ProcessingMetrics',
]
