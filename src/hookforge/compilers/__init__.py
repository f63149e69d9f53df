"""Compilers that build hook dispatchers.

This module provides:
- DispatchFactory: shared discipline handling and tap invocation
- Series strategies: SeriesFactory, BailFactory, WaterfallFactory, LoopFactory
- Parallel strategies: ParallelFactory, ParallelBailFactory
"""

from hookforge.compilers.factory import DispatchFactory, Invocation, trampoline
from hookforge.compilers.parallel import ParallelBailFactory, ParallelFactory
from hookforge.compilers.series import (
    BailFactory,
    LoopFactory,
    SeriesFactory,
    WaterfallFactory,
)

__all__ = [
    "BailFactory",
    "DispatchFactory",
    "Invocation",
    "LoopFactory",
    "ParallelBailFactory",
    "ParallelFactory",
    "SeriesFactory",
    "WaterfallFactory",
    "trampoline",
]
