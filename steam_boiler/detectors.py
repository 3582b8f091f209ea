"""
Failure detectors run during normal operation.

The degradation detector compares what the controller last commanded with
what the pumps, pump controllers and steam sensor report. The rescue detector
compares the level reading with the band predicted on the previous cycle.
Both emit failure detections and, once a repaired unit agrees again with
what was commanded, repair acknowledgements.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Set

from steam_boiler.classifier import CycleReadings
from steam_boiler.config import BoilerCharacteristics
from steam_boiler.messages import Mailbox, Message, MessageKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelBand:
    """Range the next level reading is expected to fall in."""
    minimum: float
    maximum: float

    def contains(self, level: float) -> bool:
        return self.minimum <= level <= self.maximum


def reports_by_pump(reports: Sequence[Message]) -> Dict[int, bool]:
    """Map pump index to reported state."""
    return {message.pump: message.state for message in reports}


def _known_pumps(indices: Set[int], pump_count: int, label: str) -> Set[int]:
    unknown = {i for i in indices if not 0 <= i < pump_count}
    if unknown:
        logger.warning(f"Ignoring {label} for unknown pumps {sorted(unknown)}")
    return indices - unknown


def check_steam(steam: float,
                steam_repaired: bool,
                characteristics: BoilerCharacteristics,
                outgoing: Mailbox) -> bool:
    """
    Check the steam sensor

    Returns:
        True if the reading is outside [0, maximal steam rate]
    """
    if steam < 0 or steam > characteristics.maximal_steam_rate:
        logger.warning(f"Steam reading {steam} outside [0, {characteristics.maximal_steam_rate}]")
        outgoing.send(Message(MessageKind.STEAM_FAILURE_DETECTION))
        return True

    if steam_repaired:
        logger.info("Steam sensor repaired")
        outgoing.send(Message(MessageKind.STEAM_REPAIRED_ACKNOWLEDGEMENT))
    return False


def check_pumps(expected_pump_states: Sequence[bool],
                expected_pump_control_states: Sequence[bool],
                pump_states: Dict[int, bool],
                pump_control_states: Dict[int, bool],
                repaired_pumps: Set[int],
                repaired_pump_controls: Set[int],
                outgoing: Mailbox) -> List[int]:
    """
    Check every pump and pump controller against what was commanded

    A controller is only blamed when it disagrees both with what was
    commanded and with the pump it drives; a pump is blamed whenever it
    disagrees with what was commanded.

    Args:
        expected_pump_states: Pump states last commanded, by pump
        expected_pump_control_states: Controller states last commanded, by pump
        pump_states: Reported pump states, by pump
        pump_control_states: Reported controller states, by pump
        repaired_pumps: Pumps reported repaired this cycle
        repaired_pump_controls: Controllers reported repaired this cycle
        outgoing: Mailbox for detections and acknowledgements

    Returns:
        Indices of pumps with a pump or controller fault
    """
    pump_count = len(expected_pump_states)
    repaired_pumps = _known_pumps(repaired_pumps, pump_count, "pump repairs")
    repaired_pump_controls = _known_pumps(repaired_pump_controls, pump_count, "pump control repairs")

    faulty = []
    for i in range(pump_count):
        expected_control = expected_pump_control_states[i]
        expected_pump = expected_pump_states[i]
        control = pump_control_states[i]
        pump = pump_states[i]
        fault = False

        if expected_control != control and control != pump:
            logger.warning(f"Pump controller {i} failure: commanded {expected_control}, "
                           f"reports {control}, pump reports {pump}")
            outgoing.send(Message(MessageKind.PUMP_CONTROL_FAILURE_DETECTION, pump=i))
            fault = True
        elif expected_control == control and i in repaired_pump_controls and control == pump:
            logger.info(f"Pump controller {i} repaired")
            outgoing.send(Message(MessageKind.PUMP_CONTROL_REPAIRED_ACKNOWLEDGEMENT, pump=i))

        if expected_pump != pump:
            logger.warning(f"Pump {i} failure: commanded {expected_pump}, reports {pump}")
            outgoing.send(Message(MessageKind.PUMP_FAILURE_DETECTION, pump=i))
            fault = True
        elif i in repaired_pumps:
            logger.info(f"Pump {i} repaired")
            outgoing.send(Message(MessageKind.PUMP_REPAIRED_ACKNOWLEDGEMENT, pump=i))

        if fault:
            faulty.append(i)

    return faulty


def check_degraded(readings: CycleReadings,
                   expected_pump_states: Sequence[bool],
                   expected_pump_control_states: Sequence[bool],
                   characteristics: BoilerCharacteristics,
                   outgoing: Mailbox) -> bool:
    """
    Run the steam and pump checks for one cycle

    The readings must already have passed the transmission check, so the
    steam value exists and every pump has exactly one report of each kind.

    Returns:
        True if any equipment fault was found
    """
    steam_fault = check_steam(readings.steam_value, readings.steam_repaired, characteristics, outgoing)
    faulty_pumps = check_pumps(
        expected_pump_states,
        expected_pump_control_states,
        reports_by_pump(readings.pump_states),
        reports_by_pump(readings.pump_control_states),
        readings.repaired_pumps,
        readings.repaired_pump_controls,
        outgoing,
    )
    return steam_fault or bool(faulty_pumps)


def check_rescue(level: float,
                 band: LevelBand,
                 level_repaired: bool,
                 outgoing: Mailbox) -> bool:
    """
    Check the level sensor against the predicted band

    Must run before the band is recomputed for the next cycle.

    Returns:
        True if the level reading is outside the band
    """
    if not band.contains(level):
        logger.warning(f"Level {level} outside predicted band [{band.minimum}, {band.maximum}]")
        return True

    if level_repaired:
        logger.info("Level sensor repaired")
        outgoing.send(Message(MessageKind.LEVEL_REPAIRED_ACKNOWLEDGEMENT))
    return False
