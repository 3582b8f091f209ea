"""
Steam Boiler Controller

Decision core of the boiler control loop. An external driver calls
:meth:`SteamBoilerController.clock` once per sampling interval with the
messages received from the physical units; the controller decides the
operating mode, detects failures and writes commands to the outgoing
mailbox.

Example:
    >>> controller = SteamBoilerController(BoilerCharacteristics())
    >>> incoming = Mailbox([...])   # readings from the physical units
    >>> outgoing = Mailbox()
    >>> controller.clock(incoming, outgoing)
    >>> controller.status_message
    'WAITING'
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List

from steam_boiler.allocation import PumpAllocation, select_pumps
from steam_boiler.classifier import CycleReadings
from steam_boiler.config import BoilerCharacteristics
from steam_boiler.detectors import LevelBand, check_degraded, check_rescue
from steam_boiler.exceptions import ConfigurationError
from steam_boiler.initialization import initial_readings_valid, initialise
from steam_boiler.messages import Mailbox, Message, MessageKind, Mode
from steam_boiler.protection import StopDebouncer, level_within_limits, transmission_failure
from steam_boiler.state_machine import (
    OPERATING_MODES,
    Event,
    OperatingMode,
    announcement_for,
    next_mode,
)

logger = logging.getLogger(__name__)

# Seconds between two clock signals
DEFAULT_CYCLE_DURATION = 5.0


@dataclass
class ControllerState:
    """Mutable state owned by one controller."""
    mode: OperatingMode
    expected_pump_states: List[bool]
    expected_pump_control_states: List[bool]
    minimum_expected_level: float
    maximum_expected_level: float
    cycle: int = 0

    @classmethod
    def initial(cls, characteristics: BoilerCharacteristics) -> "ControllerState":
        pump_count = characteristics.number_of_pumps
        return cls(
            mode=OperatingMode.WAITING,
            expected_pump_states=[False] * pump_count,
            expected_pump_control_states=[False] * pump_count,
            minimum_expected_level=0.0,
            maximum_expected_level=characteristics.capacity,
        )

    @property
    def expected_band(self) -> LevelBand:
        return LevelBand(self.minimum_expected_level, self.maximum_expected_level)


class SteamBoilerController:
    """
    Controller for one steam boiler

    Each instance owns its state; several boilers need several instances.

    Attributes:
        characteristics: Boiler the controller was built for
        cycle_duration: Seconds between clock signals
        state: Current controller state
    """

    def __init__(self,
                 characteristics: BoilerCharacteristics,
                 cycle_duration: float = DEFAULT_CYCLE_DURATION):
        """
        Initialize controller

        Args:
            characteristics: Boiler characteristics
            cycle_duration: Seconds between clock signals

        Raises:
            ConfigurationError: If the cycle duration is not positive
        """
        if cycle_duration <= 0:
            raise ConfigurationError(f"Cycle duration must be positive, got {cycle_duration}")

        self.characteristics = characteristics
        self.cycle_duration = float(cycle_duration)
        self.state = ControllerState.initial(characteristics)
        self._debouncer = StopDebouncer()
        self._emergency_announced = False

    @property
    def mode(self) -> OperatingMode:
        return self.state.mode

    @property
    def stop_count(self) -> int:
        return self._debouncer.count

    @property
    def status_message(self) -> str:
        """Name of the current mode, for display only."""
        return self.state.mode.name

    def clock(self, incoming: Iterable[Message], outgoing: Mailbox) -> None:
        """
        Process one clock signal

        Args:
            incoming: Messages received from the physical units this cycle
            outgoing: Mailbox the commands for this cycle are written to
        """
        self.state.cycle += 1
        self._emergency_announced = False

        readings = CycleReadings.from_mailbox(incoming)
        pump_count = self.characteristics.number_of_pumps

        if self.state.mode is not OperatingMode.EMERGENCY_STOP:
            if self._debouncer.update(readings.stop_requested):
                logger.warning(f"Stop held for {self._debouncer.count} cycles")
                self._apply(Event.STOP_REQUESTED, outgoing)

        if transmission_failure(readings, pump_count):
            self._apply(Event.TRANSMISSION_FAILURE, outgoing)

        level = readings.level_value
        steam = readings.steam_value

        if self.state.mode is OperatingMode.WAITING and level is not None:
            self._initialise(level, steam, readings.units_waiting, outgoing)
        elif self.state.mode is OperatingMode.READY:
            self._apply(Event.START_OPERATION, outgoing)
        elif self.state.mode in OPERATING_MODES and level is not None and steam is not None:
            self._operate(readings, level, outgoing)

    def _apply(self, event: Event, outgoing: Mailbox) -> None:
        """Move along the state machine and announce the resulting mode."""
        previous = self.state.mode
        self.state.mode = next_mode(previous, event)

        if self.state.mode is not previous:
            logger.info(f"Cycle {self.state.cycle}: {previous} -> {self.state.mode} ({event.name})")

        announcement = announcement_for(self.state.mode)
        if announcement is None:
            return
        if announcement is Mode.EMERGENCY_STOP:
            if self._emergency_announced:
                return
            self._emergency_announced = True
        outgoing.send(Message(MessageKind.MODE, mode=announcement))

    def _initialise(self, level: float, steam, units_waiting: bool, outgoing: Mailbox) -> None:
        if initialise(level, units_waiting, self.characteristics, outgoing):
            self._apply(Event.UNITS_READY, outgoing)

        if not initial_readings_valid(level, steam, self.characteristics):
            logger.warning(f"Invalid readings during initialization: level={level}, steam={steam}")
            self._apply(Event.INVALID_INITIAL_READINGS, outgoing)

    def _operate(self, readings: CycleReadings, level: float, outgoing: Mailbox) -> None:
        degraded = check_degraded(
            readings,
            self.state.expected_pump_states,
            self.state.expected_pump_control_states,
            self.characteristics,
            outgoing,
        )
        self._apply(Event.EQUIPMENT_FAULT if degraded else Event.NO_FAULT, outgoing)

        if check_rescue(level, self.state.expected_band, readings.level_repaired, outgoing):
            self._apply(Event.LEVEL_SENSOR_FAULT, outgoing)
            outgoing.send(Message(MessageKind.LEVEL_FAILURE_DETECTION))

        if not level_within_limits(level, self.characteristics):
            logger.warning(
                f"Level {level} outside limits [{self.characteristics.minimal_limit_level}, "
                f"{self.characteristics.maximal_limit_level}]"
            )
            self._apply(Event.LIMIT_VIOLATION, outgoing)

        self.normal_operation(level, outgoing)

    def normal_operation(self, level: float, outgoing: Mailbox) -> PumpAllocation:
        """
        Steer the level toward the middle of the normal band

        Opens the pump subset closest to the flow needed to reach the target
        level within one cycle, then predicts the band the next level reading
        must fall in.

        Args:
            level: Current water level
            outgoing: Mailbox for pump commands

        Returns:
            The pump allocation that was commanded
        """
        required_flow = (self.characteristics.target_level - level) / self.cycle_duration
        allocation = self.allocate_pumps(required_flow, outgoing)

        self.state.maximum_expected_level = level + allocation.pumpage * self.cycle_duration
        self.state.minimum_expected_level = (
            self.state.maximum_expected_level
            - self.characteristics.maximal_steam_rate * self.cycle_duration
        )
        logger.debug(
            f"Predicted level band [{self.state.minimum_expected_level:.2f}, "
            f"{self.state.maximum_expected_level:.2f}]"
        )
        return allocation

    def allocate_pumps(self, required_flow: float, outgoing: Mailbox) -> PumpAllocation:
        """
        Command the pump subset that best delivers ``required_flow``

        Every pump is first commanded closed, then the chosen pumps are
        commanded open. Expected states follow the commands.
        """
        for pump in range(self.characteristics.number_of_pumps):
            outgoing.send(Message(MessageKind.CLOSE_PUMP, pump=pump))
            self.state.expected_pump_states[pump] = False
            self.state.expected_pump_control_states[pump] = False

        allocation = select_pumps(self.characteristics.pump_capacities, required_flow)

        for pump in range(self.characteristics.number_of_pumps):
            if allocation.is_open(pump):
                outgoing.send(Message(MessageKind.OPEN_PUMP, pump=pump))
                self.state.expected_pump_states[pump] = True
                self.state.expected_pump_control_states[pump] = True

        return allocation
