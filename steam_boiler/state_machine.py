"""
Operating mode state machine.

All mode changes go through :func:`next_mode`, which looks the move up in a
single transition table. Emergency stop is absorbing: once entered, every
event leaves the controller there.
"""

from enum import Enum, auto
from typing import Dict, Optional, Tuple

from steam_boiler.exceptions import TransitionError
from steam_boiler.messages import Mode


class OperatingMode(Enum):
    """Modes the controller itself can be in."""
    WAITING = auto()
    READY = auto()
    NORMAL = auto()
    DEGRADED = auto()
    RESCUE = auto()
    EMERGENCY_STOP = auto()

    def __str__(self) -> str:
        return self.name


class Event(Enum):
    """Outcomes of one cycle's checks that can move the controller."""
    UNITS_READY = auto()
    START_OPERATION = auto()
    NO_FAULT = auto()
    EQUIPMENT_FAULT = auto()
    LEVEL_SENSOR_FAULT = auto()
    STOP_REQUESTED = auto()
    TRANSMISSION_FAILURE = auto()
    LIMIT_VIOLATION = auto()
    INVALID_INITIAL_READINGS = auto()


EMERGENCY_EVENTS = frozenset({
    Event.STOP_REQUESTED,
    Event.TRANSMISSION_FAILURE,
    Event.LIMIT_VIOLATION,
    Event.INVALID_INITIAL_READINGS,
})

OPERATING_MODES = frozenset({
    OperatingMode.NORMAL,
    OperatingMode.DEGRADED,
    OperatingMode.RESCUE,
})


def _build_transitions() -> Dict[Tuple[OperatingMode, Event], OperatingMode]:
    table = {
        (OperatingMode.WAITING, Event.UNITS_READY): OperatingMode.READY,
        (OperatingMode.READY, Event.START_OPERATION): OperatingMode.NORMAL,
    }
    for mode in OPERATING_MODES:
        table[(mode, Event.NO_FAULT)] = OperatingMode.NORMAL
        table[(mode, Event.EQUIPMENT_FAULT)] = OperatingMode.DEGRADED
        table[(mode, Event.LEVEL_SENSOR_FAULT)] = OperatingMode.RESCUE
    for mode in OperatingMode:
        for event in EMERGENCY_EVENTS:
            table[(mode, event)] = OperatingMode.EMERGENCY_STOP
    for event in Event:
        table[(OperatingMode.EMERGENCY_STOP, event)] = OperatingMode.EMERGENCY_STOP
    return table


TRANSITIONS = _build_transitions()


def next_mode(mode: OperatingMode, event: Event) -> OperatingMode:
    """Mode reached from ``mode`` when ``event`` happens.

    Raises:
        TransitionError: If the state machine has no such edge
    """
    try:
        return TRANSITIONS[(mode, event)]
    except KeyError:
        raise TransitionError(mode, event)


ANNOUNCEMENTS = {
    OperatingMode.WAITING: Mode.INITIALISATION,
    OperatingMode.NORMAL: Mode.NORMAL,
    OperatingMode.DEGRADED: Mode.DEGRADED,
    OperatingMode.RESCUE: Mode.RESCUE,
    OperatingMode.EMERGENCY_STOP: Mode.EMERGENCY_STOP,
}


def announcement_for(mode: OperatingMode) -> Optional[Mode]:
    """Mode value announced for ``mode``; READY is announced by PROGRAM_READY instead."""
    return ANNOUNCEMENTS.get(mode)
