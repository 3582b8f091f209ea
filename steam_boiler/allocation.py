"""
Pump Allocation Optimizer

Pumps are either fully open or closed, so the reachable flows are the sums of
capacities over subsets of pumps. Every subset is scored and the one closest
to the required flow is opened.

Subsets are enumerated as fixed-width bitmasks ``0 .. 2**n - 1`` where bit
``i`` stands for pump ``i``. Ties go to the lowest bitmask.
"""

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PumpAllocation:
    """Chosen pump subset."""
    mask: int                       # Bitmask of open pumps (bit i = pump i)
    open_pumps: Tuple[int, ...]     # Indices of open pumps, ascending
    pumpage: float                  # Combined capacity of the open pumps
    deviation: float                # |required - pumpage|

    def is_open(self, pump: int) -> bool:
        return bool(self.mask >> pump & 1)


def candidate_subsets(pump_count: int) -> np.ndarray:
    """
    Enumerate every pump on/off combination

    Args:
        pump_count: Number of pumps

    Returns:
        Boolean array of shape (2**pump_count, pump_count); row m is
        bitmask m, column i is pump i
    """
    if pump_count < 0:
        raise ValueError(f"Pump count must be non-negative, got {pump_count}")
    masks = np.arange(2 ** pump_count, dtype=np.int64)
    bits = np.arange(pump_count, dtype=np.int64)
    return ((masks[:, None] >> bits[None, :]) & 1).astype(bool)


def select_pumps(capacities: Sequence[float], required_flow: float) -> PumpAllocation:
    """
    Pick the pump subset whose combined capacity best matches a flow

    Args:
        capacities: Capacity of each pump, indexed by pump
        required_flow: Net flow wanted from the pumps

    Returns:
        The best subset; the first in enumeration order on ties
    """
    caps = np.asarray(capacities, dtype=float)
    subsets = candidate_subsets(len(caps))

    totals = subsets.astype(float) @ caps
    deviations = np.abs(required_flow - totals)

    # argmin returns the first minimum, which is the lowest bitmask
    best = int(np.argmin(deviations))

    allocation = PumpAllocation(
        mask=best,
        open_pumps=tuple(int(i) for i in np.flatnonzero(subsets[best])),
        pumpage=float(totals[best]),
        deviation=float(deviations[best]),
    )
    logger.debug(
        f"Required flow {required_flow:.3f}: opening pumps {list(allocation.open_pumps)} "
        f"for {allocation.pumpage:.3f} (deviation {allocation.deviation:.3f})"
    )
    return allocation
