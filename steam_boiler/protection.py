"""
Boiler Protection Logic

Checks that end the control session: missing or inconsistent transmissions,
a stop request held for several cycles, and a water level outside the hard
safety limits.
"""

import logging
from typing import List

from steam_boiler.classifier import CycleReadings
from steam_boiler.config import BoilerCharacteristics
from steam_boiler.messages import Message

logger = logging.getLogger(__name__)

# Consecutive cycles with a stop signal before emergency stop
STOP_CYCLES_BEFORE_EMERGENCY = 3


def _pump_report_failures(reports: List[Message], pump_count: int, label: str) -> List[str]:
    if len(reports) != pump_count:
        return [f"expected {pump_count} {label} reports, got {len(reports)}"]

    indices = sorted(m.pump for m in reports)
    if indices != list(range(pump_count)):
        return [f"{label} reports do not cover pumps 0..{pump_count - 1}: {indices}"]
    return []


def transmission_failures(readings: CycleReadings, pump_count: int) -> List[str]:
    """
    List the reasons this cycle's transmission is unusable

    Args:
        readings: Classified inbound readings
        pump_count: Number of pumps the boiler has

    Returns:
        Human readable reasons, empty if the transmission is intact
    """
    reasons = []

    if readings.level.message is None:
        reasons.append(f"level reading {readings.level.status.value}")
    if readings.steam.message is None:
        reasons.append(f"steam reading {readings.steam.status.value}")

    reasons.extend(_pump_report_failures(readings.pump_states, pump_count, "pump state"))
    reasons.extend(_pump_report_failures(readings.pump_control_states, pump_count, "pump control state"))

    return reasons


def transmission_failure(readings: CycleReadings, pump_count: int) -> bool:
    """True if mandatory readings are missing, ambiguous or inconsistent."""
    reasons = transmission_failures(readings, pump_count)
    if reasons:
        logger.warning(f"Transmission failure: {'; '.join(reasons)}")
    return bool(reasons)


def level_within_limits(level: float, characteristics: BoilerCharacteristics) -> bool:
    """True if the level lies inside the hard safety limits."""
    return characteristics.minimal_limit_level <= level <= characteristics.maximal_limit_level


class StopDebouncer:
    """
    Counts consecutive cycles carrying a stop signal

    A single stray stop does nothing; the stop has to be held for
    ``threshold`` cycles in a row before the controller gives up.
    """

    def __init__(self, threshold: int = STOP_CYCLES_BEFORE_EMERGENCY):
        if threshold < 1:
            raise ValueError(f"Stop threshold must be at least 1, got {threshold}")
        self.threshold = threshold
        self.count = 0

    def update(self, stop_received: bool) -> bool:
        """
        Record one cycle

        Args:
            stop_received: Whether the cycle carried a stop signal

        Returns:
            True once the stop has been held for ``threshold`` cycles
        """
        if not stop_received:
            self.count = 0
            return False

        self.count += 1
        logger.debug(f"Stop signal {self.count}/{self.threshold}")
        return self.count >= self.threshold
